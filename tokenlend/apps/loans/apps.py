from django.apps import AppConfig


class LoansConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tokenlend.apps.loans"
    verbose_name = "Loans"
