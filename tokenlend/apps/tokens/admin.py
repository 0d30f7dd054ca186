from django.contrib import admin
from .models import Token


@admin.register(Token)
class TokenAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "address", "holding_address", "decimals", "created_at")
    search_fields = ("name", "address", "holding_address")
