from decimal import Decimal

MAX_TOKEN_SUPPLY = 100_000_000_000  # 100 billion whole tokens
MAX_TOKEN_DECIMALS = 18

WEI_PER_NATIVE = 10**18
MAXIMUM_WEI_FOR_AUTHORITY = WEI_PER_NATIVE  # 1 native unit reserved for tx fees

MAX_ACTIVE_LOANS = 3  # user can only have 3 active loans at a time
MAX_PERCENT_OF_SUPPLY_IN_LOAN = Decimal("0.025")  # 2.5%
