from django.apps import AppConfig


class TokensConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tokenlend.apps.tokens"
    verbose_name = "Tokens"
