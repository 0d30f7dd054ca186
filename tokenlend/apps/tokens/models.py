# tokenlend/apps/tokens/models.py
from django.db import models
from tokenlend.apps.authority.models import Authority


class Token(models.Model):
    """Off-chain metadata of a token minted by the authority."""

    address = models.CharField(max_length=64, unique=True)  # token contract
    holding_address = models.CharField(max_length=64)  # holds the initial supply
    decimals = models.PositiveSmallIntegerField()
    name = models.CharField(max_length=64)
    authority = models.ForeignKey(
        Authority, on_delete=models.PROTECT, related_name="tokens"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.name} ({self.address})"
