# tokenlend/apps/loans/models.py
from django.db import models
from tokenlend.apps.tokens.models import Token
from tokenlend.apps.users.models import WalletUser


class Loan(models.Model):
    user = models.ForeignKey(WalletUser, on_delete=models.CASCADE, related_name="loans")
    token = models.ForeignKey(Token, on_delete=models.PROTECT, related_name="loans")
    # base units (amount * 10**decimals); can exceed 64 bits at 18 decimals
    amount = models.DecimalField(max_digits=40, decimal_places=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(
                fields=["user", "token", "created_at"], name="loan_user_token_created_idx"
            )
        ]


class Tx(models.Model):
    """Off-chain mirror of an on-chain transfer tied to a loan."""

    MODE = [("payment", "Payment")]

    loan = models.ForeignKey(Loan, on_delete=models.CASCADE, related_name="txs")
    mode = models.CharField(max_length=16, choices=MODE, default="payment", db_index=True)
    tx_id = models.CharField(max_length=128, db_index=True)  # on-chain tx hash
    created_at = models.DateTimeField(auto_now_add=True)
