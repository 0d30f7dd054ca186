"""
Loan Manager
Checks borrower eligibility, records loans and disburses them through the
transfer recorder. Also serves the outstanding-loan queries.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional
from django.db import transaction
import logging

from tokenlend.apps.authority.services.authority import AuthorityManager
from tokenlend.apps.loans.models import Loan, Tx
from tokenlend.apps.loans.services.locks import UserLoanLock
from tokenlend.apps.loans.services.transfer import TransferRecorder
from tokenlend.apps.tokens.models import Token
from tokenlend.apps.tokens.services.token_manager import TokenManager
from tokenlend.apps.users.models import WalletUser
from tokenlend.constants import MAX_ACTIVE_LOANS, MAX_PERCENT_OF_SUPPLY_IN_LOAN
from tokenlend.errors import (
    AuthorityLoanError,
    InvalidAmountError,
    MaxActiveLoansError,
    MaxLoanSuppliedError,
    UnknownTokenError,
)
from tokenlend.utils import get_ratio_of_supply, unscale_amount, validate_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisbursementResult:
    id: int
    tx_id: str
    loan_id: int


def readable_loans(loans) -> List[Dict]:
    data = []
    for loan in loans:
        tx = next(iter(loan.txs.all()), None)
        data.append(
            {
                "loan_id": loan.id,
                "token_address": loan.token.address,
                "token_name": loan.token.name,
                "user_address": loan.user.wallet_address,
                "tx_id": tx.tx_id if tx else None,
                "amount": unscale_amount(loan.amount, loan.token.decimals),
                "timestamp": loan.created_at,
            }
        )
    return data


class LoanManager:
    def __init__(
        self,
        authority: AuthorityManager,
        tokens: TokenManager,
        transfers: TransferRecorder,
        ledger,
        lock: Optional[UserLoanLock] = None,
    ):
        self.authority = authority
        self.tokens = tokens
        self.transfers = transfers
        self.ledger = ledger
        self.lock = lock

    def disburse_loan(
        self, user_address: str, token_address: str, amount: int
    ) -> DisbursementResult:
        """
        Disburse `amount` base units of a token to the user's wallet.

        Side effects: may open the user's holding account, and the authority
        pays the transaction fee.

        Returns:
            Off-chain tx id, on-chain tx hash and loan id
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise InvalidAmountError()
        user_address = validate_address(user_address)
        token_address = validate_address(token_address)

        if self.lock is None:
            return self._disburse(user_address, token_address, amount)
        with self.lock.hold(user_address):
            return self._disburse(user_address, token_address, amount)

    def _disburse(self, user_address: str, token_address: str, amount: int) -> DisbursementResult:
        token = self._check_eligibility(user_address, token_address, amount)

        with ThreadPoolExecutor(max_workers=1) as executor:
            holding_future = executor.submit(
                self.tokens.create_associated_account, token.address, user_address
            )
            loan = self._create_loan(user_address, token, amount)
            holding = holding_future.result()

        transfer = self.transfers.transfer_token(
            amount, loan.id, token.address, holding.address
        )
        return DisbursementResult(id=transfer.id, tx_id=transfer.tx_id, loan_id=loan.id)

    def _check_eligibility(self, user_address: str, token_address: str, amount: int) -> Token:
        if self.authority.validate(user_address, suppress_error=True):
            raise AuthorityLoanError()

        token = self.tokens.find_token(token_address)
        if token is None:
            raise UnknownTokenError()

        with ThreadPoolExecutor(max_workers=1) as executor:
            mint_future = executor.submit(self.ledger.get_mint, token.address)
            loans = list(self.get_outstanding_loans(user_address, token.address))
            mint = mint_future.result()

        if len(loans) >= MAX_ACTIVE_LOANS:
            raise MaxActiveLoansError()

        outstanding = self.get_total_outstanding_amount(user_address, token.address, loans=loans)
        if mint.supply <= 0:
            raise MaxLoanSuppliedError()
        if get_ratio_of_supply(outstanding + amount, mint.supply) > MAX_PERCENT_OF_SUPPLY_IN_LOAN:
            raise MaxLoanSuppliedError()

        return token

    def _create_loan(self, user_address: str, token: Token, amount: int) -> Loan:
        user, _ = WalletUser.objects.get_or_create(wallet_address=user_address)
        loan = Loan.objects.create(user=user, token=token, amount=amount)
        logger.info(f"Loan {loan.id} created: {amount} units of {token.address} for {user_address}")
        return loan

    def get_outstanding_loans(
        self,
        user_address: str,
        token_address: Optional[str] = None,
        readable: bool = False,
    ):
        """
        Loans of a user, optionally for one token. Pass readable=True for
        display-ready dicts with amounts rescaled by the token decimals.
        """
        loans = (
            Loan.objects.filter(user__wallet_address__iexact=user_address)
            .select_related("token", "user")
            .prefetch_related("txs")
            .order_by("created_at", "id")
        )
        if token_address:
            loans = loans.filter(token__address__iexact=token_address)

        return readable_loans(loans) if readable else loans

    def get_total_outstanding_amount(
        self, user_address: str, token_address: str, loans=None
    ) -> int:
        if loans is None:
            loans = self.get_outstanding_loans(user_address, token_address)
        return sum((int(loan.amount) for loan in loans), 0)

    def get_all_outstanding_loans(self, authority_address: str) -> List[Dict]:
        self.authority.validate(authority_address)
        loans = (
            Loan.objects.select_related("token", "user")
            .prefetch_related("txs")
            .order_by("created_at", "id")
        )
        return readable_loans(loans)

    def reset_loans(self) -> Dict[str, int]:
        """Delete every transaction, loan and borrower row."""
        with transaction.atomic():
            txs, _ = Tx.objects.all().delete()
            loans, _ = Loan.objects.all().delete()
            users, _ = WalletUser.objects.all().delete()
        logger.warning(f"Loan data reset: {txs} txs, {loans} loans, {users} users deleted")
        return {"txs": txs, "loans": loans, "users": users}
