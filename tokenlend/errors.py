"""
Error taxonomy for the lending service.

Every error carries the user-facing message that the HTTP layer returns
as-is; callers raise the bare class and get the default message.
"""


class LendingError(Exception):
    message = "Lending request failed"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


# Configuration / authorization


class ConfigurationError(LendingError):
    message = "Error: define TOP_AUTHORITY (keypair of admin) in .env"


class UnauthorizedError(LendingError):
    message = "Unauthorized request"


# Validation


class InvalidRequestError(LendingError):
    message = "Invalid request"


class InvalidAmountError(LendingError):
    message = "Invalid amount"


class InvalidAddressError(LendingError):
    message = "Invalid wallet/token address"


class InvalidDecimalsError(LendingError):
    message = "Invalid token decimals"


class InvalidTokenNameError(LendingError):
    message = "Invalid token name"


class UnknownTokenError(LendingError):
    message = "Invalid token mint/address"


# Business limits


class MaxSupplyError(LendingError):
    message = "Token supply exceeds the maximum allowed limit"


class AlreadyAtMaxSupplyError(LendingError):
    message = "Token supply has already reached the maximum limit"


class InvalidSupplyAmountError(LendingError):
    message = "Unable to mint the request amount."


class MaxActiveLoansError(LendingError):
    message = (
        "You have exceeded maximum allowable active loans. "
        "Close existing loans before requesting new one."
    )


class MaxLoanSuppliedError(LendingError):
    message = "You have exhausted the maximum loanable amount"


class AuthorityLoanError(LendingError):
    message = "Authority cannot take loans"


class LoanInProgressError(LendingError):
    message = "Another loan request for this wallet is in progress"


# Ledger


class LedgerError(LendingError):
    message = "Ledger request failed"


class TransactionFailedError(LedgerError):
    message = "Transaction failed on-chain"


class TransactionExpiredError(LedgerError):
    message = "Transaction was not confirmed before it expired"
