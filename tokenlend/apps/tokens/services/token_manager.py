"""
Token Manager
Creates lending tokens owned by the authority, mints supply under the
platform ceiling and exposes merged on-chain/off-chain token metadata.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional
import logging

from tokenlend.apps.authority.services.authority import AuthorityManager
from tokenlend.apps.tokens.models import Token
from tokenlend.apps.tokens.services.ledger import HoldingAccount
from tokenlend.constants import MAX_TOKEN_DECIMALS
from tokenlend.errors import (
    AlreadyAtMaxSupplyError,
    InvalidAmountError,
    InvalidDecimalsError,
    InvalidSupplyAmountError,
    InvalidTokenNameError,
    MaxSupplyError,
    UnknownTokenError,
)
from tokenlend.utils import get_token_max_supply, is_greater_than_max_supply

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetupTokenResult:
    id: int
    token_address: str
    holding_address: str


@dataclass(frozen=True)
class TokenInfo:
    id: int
    address: str
    name: str
    decimals: int
    holding_address: str
    supply: int
    mint_authority: Optional[str]


def validate_decimals(decimals) -> int:
    if (
        not isinstance(decimals, int)
        or isinstance(decimals, bool)
        or not 0 <= decimals <= MAX_TOKEN_DECIMALS
    ):
        raise InvalidDecimalsError()
    return decimals


def validate_name(name) -> str:
    max_length = Token._meta.get_field("name").max_length
    if not isinstance(name, str) or len(name) > max_length:
        raise InvalidTokenNameError()
    return name


class TokenManager:
    def __init__(self, authority: AuthorityManager, ledger):
        self.authority = authority
        self.ledger = ledger

    def find_token(self, token_address: str) -> Optional[Token]:
        return Token.objects.filter(address__iexact=token_address).first()

    def create_token(self, decimals: int, name: str = "", symbol: Optional[str] = None) -> str:
        """
        Deploy a token whose owner and mint authority is the authority.

        Returns:
            Token address
        """
        validate_decimals(decimals)
        validate_name(name)
        symbol = symbol or name[:8].upper() or "LEND"
        return self.ledger.create_mint(
            self.authority.account, self.authority.address, decimals, name, symbol
        )

    def create_associated_account(self, token_address: str, owner_address: str) -> HoldingAccount:
        return self.ledger.get_or_create_holding_account(
            self.authority.account, token_address, owner_address
        )

    def setup_token(self, decimals: int, name: str, payer: str, supply: int) -> SetupTokenResult:
        """
        Provision a token end to end: deploy it, open the authority's holding
        account, mint the initial supply there and register the token.

        Args:
            decimals: Token decimals, 0-18
            name: Display name (also used for the symbol)
            payer: Address requesting the setup; must be the authority
            supply: Initial supply in base units
        """
        self.authority.validate(payer)
        validate_decimals(decimals)
        validate_name(name)
        if not isinstance(supply, int) or isinstance(supply, bool) or supply < 0:
            raise InvalidAmountError()
        if is_greater_than_max_supply(supply, decimals):
            raise MaxSupplyError()

        token_address = self.create_token(decimals, name)
        holding = self.create_associated_account(token_address, self.authority.address)
        if supply:
            self.ledger.mint_to(self.authority.account, token_address, holding.address, supply)

        self.authority.persist()
        token = Token.objects.create(
            address=token_address,
            holding_address=holding.address,
            decimals=decimals,
            name=name,
            authority=self.authority.get_record(),
        )
        logger.info(f"Token {name} set up at {token_address} with supply {supply}")

        return SetupTokenResult(
            id=token.id, token_address=token_address, holding_address=holding.address
        )

    def mint(
        self, token_address: str, amount: int, holding_account: Optional[str] = None
    ) -> str:
        """Mint `amount` base units, refusing anything that would cross the ceiling."""
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise InvalidAmountError()

        if holding_account is None:
            token = self.find_token(token_address)
            if token is None:
                raise UnknownTokenError()
            holding_account = token.holding_address

        mint = self.ledger.get_mint(token_address)
        remaining = get_token_max_supply(mint.decimals) - mint.supply
        if remaining <= 0:
            raise AlreadyAtMaxSupplyError()
        if amount > remaining:
            raise InvalidSupplyAmountError()

        tx_hash = self.ledger.mint_to(
            self.authority.account, mint.address, holding_account, amount
        )
        logger.info(f"Minted {amount} units of {mint.address} into {holding_account}")
        return tx_hash

    def get_token_info(self, token_address: str) -> TokenInfo:
        with ThreadPoolExecutor(max_workers=1) as executor:
            mint_future = executor.submit(self.ledger.get_mint, token_address)
            token = self.find_token(token_address)
            if token is None:
                mint_future.cancel()
                raise UnknownTokenError()
            mint = mint_future.result()

        return TokenInfo(
            id=token.id,
            address=token.address,
            name=token.name,
            decimals=token.decimals,
            holding_address=token.holding_address,
            supply=mint.supply,
            mint_authority=mint.mint_authority,
        )
