# tokenlend/apps/authority/models.py
from django.db import models


class Authority(models.Model):
    """Platform admin wallet. One row per deployment (upserted on public_key)."""

    public_key = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "authorities"

    def __str__(self):
        return self.public_key
