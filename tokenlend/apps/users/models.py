# tokenlend/apps/users/models.py
from django.db import models


class WalletUser(models.Model):
    """Borrower identified by wallet address; created on first loan."""

    wallet_address = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.wallet_address
