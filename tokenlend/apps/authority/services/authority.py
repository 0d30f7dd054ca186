"""
Authority Service
Resolves the admin identity from configuration, keeps its row in the
database and tops up its native balance for transaction fees.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Tuple
from django.conf import settings
from eth_account.signers.local import LocalAccount
import logging

from tokenlend.apps.authority.models import Authority
from tokenlend.constants import MAXIMUM_WEI_FOR_AUTHORITY
from tokenlend.errors import ConfigurationError, UnauthorizedError
from tokenlend.utils import decode_secret_to_account, same_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorityIdentity:
    """Signing account of the platform admin. Resolved once, shared read-only."""

    account: LocalAccount
    address: str

    @classmethod
    def resolve(cls, secret: Optional[str] = None) -> "AuthorityIdentity":
        secret = secret if secret is not None else settings.TOP_AUTHORITY
        if not secret:
            raise ConfigurationError()
        try:
            account = decode_secret_to_account(secret)
        except ValueError:
            raise ConfigurationError()
        return cls(account=account, address=account.address)

    def matches(self, address: str) -> bool:
        return same_address(self.address, address)


class AuthorityManager:
    def __init__(self, identity: AuthorityIdentity, ledger):
        self.identity = identity
        self.ledger = ledger

    @property
    def address(self) -> str:
        return self.identity.address

    @property
    def account(self) -> LocalAccount:
        return self.identity.account

    def ensure_funded(self) -> Optional[str]:
        """
        Top up the authority to MAXIMUM_WEI_FOR_AUTHORITY from the faucet.

        Returns:
            Faucet transaction hash, or None when the balance already covers it
        """
        balance = self.ledger.get_balance(self.address)
        if balance >= MAXIMUM_WEI_FOR_AUTHORITY:
            logger.info(f"Authority {self.address} already funded ({balance} wei)")
            return None

        shortfall = MAXIMUM_WEI_FOR_AUTHORITY - balance
        with ThreadPoolExecutor(max_workers=2) as executor:
            airdrop = executor.submit(self.ledger.request_airdrop, self.address, shortfall)
            latest = executor.submit(self.ledger.get_latest_block)
            tx_hash = airdrop.result()
            latest_block = latest.result()

        self.ledger.confirm_transaction(tx_hash, latest_block)
        logger.info(f"Authority {self.address} funded with {shortfall} wei (tx: {tx_hash})")
        return tx_hash

    def persist(self) -> str:
        authority, created = Authority.objects.get_or_create(public_key=self.address)
        if created:
            logger.info(f"Authority {self.address} registered")
        return authority.public_key

    def get_record(self) -> Optional[Authority]:
        return Authority.objects.filter(public_key=self.address).first()

    def setup(self) -> Tuple[str, Optional[str]]:
        # funding talks to the chain only; the row is written on this thread
        with ThreadPoolExecutor(max_workers=1) as executor:
            funding = executor.submit(self.ensure_funded)
            address = self.persist()
            funding_tx = funding.result()
        return address, funding_tx

    def validate(self, address: str, suppress_error: bool = False) -> bool:
        if self.identity.matches(address):
            return True
        if suppress_error:
            return False
        raise UnauthorizedError()
