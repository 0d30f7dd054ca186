from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from tokenlend.constants import MAX_TOKEN_SUPPLY
from tokenlend.errors import InvalidAddressError, InvalidAmountError

# Scaled amounts reach 10**29 base units; the default 28-digit context would round them
_PRECISION = 80

Number = Union[int, str, Decimal]


def get_token_max_supply(decimals: int) -> int:
    return scale_amount(MAX_TOKEN_SUPPLY, decimals)


def scale_amount(value: Number, decimals: int = 0) -> int:
    """
    Convert a human amount (e.g. "12.5") into integer base units.

    Raises InvalidAmountError for non-numeric input or for more fractional
    digits than the token supports.
    """
    if isinstance(value, float):
        value = repr(value)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        try:
            scaled = Decimal(value).scaleb(decimals)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidAmountError()
        if not scaled.is_finite() or scaled != scaled.to_integral_value():
            raise InvalidAmountError()
        return int(scaled)


def unscale_amount(value: Number, decimals: int) -> str:
    """Integer base units -> plain decimal string without exponent or trailing zeros."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        amount = Decimal(value).scaleb(-decimals).normalize()
        return format(amount, "f")


def is_greater_than_max_supply(value: int, decimals: int) -> bool:
    return value > get_token_max_supply(decimals)


def get_ratio_of_supply(value: int, supply: int) -> Decimal:
    """Exact ratio value/supply; caller must reject supply == 0."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(value) / Decimal(supply)


def validate_address(address: str) -> str:
    """Return the checksum form of a wallet/contract address or raise."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidAddressError()
    return Web3.to_checksum_address(address)


def same_address(a: str, b: str) -> bool:
    return bool(a) and bool(b) and a.lower() == b.lower()


def decode_secret_to_account(value: str) -> LocalAccount:
    # ValueError on malformed keys; callers decide which error to surface
    return Account.from_key(value)


def encode_account_to_secret(account: LocalAccount) -> str:
    return Web3.to_hex(account.key)
