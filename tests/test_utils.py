"""Unit tests for amount scaling, supply math and address helpers."""

from decimal import Decimal

import pytest
from eth_account import Account

from tokenlend.constants import MAX_TOKEN_SUPPLY
from tokenlend.errors import InvalidAddressError, InvalidAmountError
from tokenlend.utils import (
    decode_secret_to_account,
    encode_account_to_secret,
    get_ratio_of_supply,
    get_token_max_supply,
    is_greater_than_max_supply,
    same_address,
    scale_amount,
    unscale_amount,
    validate_address,
)


class TestScaleAmount:
    """Tests for converting whole-token amounts into base units."""

    def test_integer_string(self):
        assert scale_amount("100", 9) == 100 * 10**9

    def test_fractional_value(self):
        assert scale_amount("12.5", 2) == 1250

    def test_float_uses_shortest_repr(self):
        assert scale_amount(0.1, 1) == 1

    def test_large_value_keeps_every_digit(self):
        assert scale_amount(MAX_TOKEN_SUPPLY, 18) == 10**29

    def test_too_many_fractional_digits_rejected(self):
        with pytest.raises(InvalidAmountError, match="Invalid amount"):
            scale_amount("1.0000000001", 9)

    @pytest.mark.parametrize("value", ["abc", "", None, "NaN", "Infinity"])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(InvalidAmountError):
            scale_amount(value, 9)


class TestUnscaleAmount:
    """Tests for rendering base units as plain decimal strings."""

    def test_whole_tokens(self):
        assert unscale_amount(10 * 10**9, 9) == "10"

    def test_fraction_without_trailing_zeros(self):
        assert unscale_amount(2_500_000_000, 9) == "2.5"

    def test_accepts_database_decimal(self):
        assert unscale_amount(Decimal("100000000000000000000000000000"), 18) == "100000000000"

    def test_zero_decimals(self):
        assert unscale_amount(42, 0) == "42"


class TestSupplyMath:
    """Tests for the platform supply ceiling and loan ratios."""

    def test_max_supply_scaled_by_decimals(self):
        assert get_token_max_supply(9) == MAX_TOKEN_SUPPLY * 10**9

    def test_greater_than_max_supply(self):
        ceiling = get_token_max_supply(6)
        assert not is_greater_than_max_supply(ceiling, 6)
        assert is_greater_than_max_supply(ceiling + 1, 6)

    def test_ratio_is_exact(self):
        assert get_ratio_of_supply(25, 1000) == Decimal("0.025")

    def test_ratio_of_huge_values(self):
        supply = 10**29
        assert get_ratio_of_supply(supply // 40 + 1, supply) > Decimal("0.025")


class TestAddresses:
    """Tests for address validation and key encoding."""

    def test_lowercase_address_is_checksummed(self):
        address = Account.create().address
        assert validate_address(address.lower()) == address

    @pytest.mark.parametrize("value", ["abc", "0x123", None, 42])
    def test_invalid_address(self, value):
        with pytest.raises(InvalidAddressError, match="Invalid wallet/token address"):
            validate_address(value)

    def test_same_address_ignores_case(self):
        address = Account.create().address
        assert same_address(address, address.lower())
        assert not same_address(address, "")

    def test_secret_round_trip(self):
        account = Account.create()
        assert decode_secret_to_account(encode_account_to_secret(account)).address == account.address

    def test_malformed_secret(self):
        with pytest.raises(ValueError):
            decode_secret_to_account("not-a-key")
