"""Test doubles and shared fixture values."""

# token created by the `token` fixture: 1000 whole tokens at 9 decimals
TOKEN_DECIMALS = 9
TOKEN_SUPPLY = 1000 * 10**TOKEN_DECIMALS
