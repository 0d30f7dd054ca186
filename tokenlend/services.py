from dataclasses import dataclass
from functools import lru_cache
from django.conf import settings

from tokenlend.apps.authority.services.authority import AuthorityIdentity, AuthorityManager
from tokenlend.apps.loans.services.lend import LoanManager
from tokenlend.apps.loans.services.locks import UserLoanLock
from tokenlend.apps.loans.services.transfer import TransferRecorder
from tokenlend.apps.tokens.services.ledger import LedgerClient
from tokenlend.apps.tokens.services.token_manager import TokenManager


@dataclass(frozen=True)
class LendingServices:
    ledger: LedgerClient
    authority: AuthorityManager
    tokens: TokenManager
    transfers: TransferRecorder
    loans: LoanManager


def build_services(ledger, identity: AuthorityIdentity, lock=None) -> LendingServices:
    authority = AuthorityManager(identity, ledger)
    tokens = TokenManager(authority, ledger)
    transfers = TransferRecorder(identity, ledger)
    loans = LoanManager(authority, tokens, transfers, ledger, lock=lock)
    return LendingServices(
        ledger=ledger,
        authority=authority,
        tokens=tokens,
        transfers=transfers,
        loans=loans,
    )


@lru_cache(maxsize=1)
def get_services() -> LendingServices:
    """Build the service graph once per process from settings."""
    identity = AuthorityIdentity.resolve()
    lock = UserLoanLock() if settings.LOAN_LOCK_REDIS_URL else None
    return build_services(LedgerClient(), identity, lock=lock)
