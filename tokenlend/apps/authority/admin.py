from django.contrib import admin
from .models import Authority


@admin.register(Authority)
class AuthorityAdmin(admin.ModelAdmin):
    list_display = ("id", "public_key", "created_at")
    search_fields = ("public_key",)
