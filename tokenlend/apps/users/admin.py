from django.contrib import admin
from .models import WalletUser


@admin.register(WalletUser)
class WalletUserAdmin(admin.ModelAdmin):
    list_display = ("id", "wallet_address", "created_at")
    search_fields = ("wallet_address",)
    date_hierarchy = "created_at"
