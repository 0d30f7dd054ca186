from django.apps import AppConfig


class AuthorityConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tokenlend.apps.authority"
    verbose_name = "Authority"
