from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging

from tokenlend.apps.authority.services.authority import AuthorityIdentity
from tokenlend.apps.loans.models import Tx
from tokenlend.apps.tokens.models import Token
from tokenlend.errors import UnknownTokenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferResult:
    id: int
    tx_id: str


class TransferRecorder:
    """Moves tokens out of the authority's holding account and records the payment."""

    def __init__(self, identity: AuthorityIdentity, ledger):
        self.identity = identity
        self.ledger = ledger

    def transfer_token(
        self, amount: int, loan_id: int, token_address: str, destination: str
    ) -> TransferResult:
        token = Token.objects.filter(address__iexact=token_address).first()
        if token is None:
            raise UnknownTokenError()

        with ThreadPoolExecutor(max_workers=2) as executor:
            submitted = executor.submit(
                self.ledger.transfer,
                self.identity.account,
                token.address,
                token.holding_address,
                destination,
                self.identity.account,
                amount,
            )
            latest = executor.submit(self.ledger.get_latest_block)
            tx_hash = submitted.result()
            latest_block = latest.result()

        self.ledger.confirm_transaction(tx_hash, latest_block)

        try:
            tx = Tx.objects.create(loan_id=loan_id, mode="payment", tx_id=tx_hash)
        except Exception:
            logger.error(
                f"Transfer {tx_hash} for loan {loan_id} confirmed on-chain but not recorded",
                exc_info=True,
            )
            raise

        logger.info(f"Loan {loan_id}: sent {amount} units of {token.address} to {destination}")
        return TransferResult(id=tx.id, tx_id=tx_hash)
