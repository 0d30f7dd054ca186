from django.contrib import admin
from .models import Loan, Tx


@admin.register(Loan)
class LoanAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "token", "amount", "created_at", "updated_at")
    search_fields = ("id", "user__wallet_address", "token__address")
    list_filter = ("token",)
    date_hierarchy = "created_at"


@admin.register(Tx)
class TxAdmin(admin.ModelAdmin):
    list_display = ("id", "loan", "mode", "tx_id", "created_at")
    list_filter = ("mode",)
    search_fields = ("tx_id",)
    date_hierarchy = "created_at"
