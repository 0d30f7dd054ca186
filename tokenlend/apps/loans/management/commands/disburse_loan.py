import os
from django.core.management.base import BaseCommand, CommandError

from tokenlend.errors import LendingError
from tokenlend.services import get_services
from tokenlend.utils import decode_secret_to_account, scale_amount, validate_address


class Command(BaseCommand):
    help = (
        "Disburse a loan to a user's wallet. "
        "Alternatively, a loan can be requested via POST /lend/request-loan."
    )

    def add_arguments(self, parser):
        parser.add_argument("token", help="Token address (run setup_token to create one).")
        parser.add_argument("amount", help="Amount in whole tokens.")
        parser.add_argument("--user", dest="user", help="Borrower wallet address.")
        parser.add_argument(
            "--user-secret",
            dest="user_secret",
            help="Borrower private key; the address is derived from it. "
            "Defaults to USER_SECRET env var when --user is omitted.",
        )

    def handle(self, *args, **options):
        user_address = options["user"]
        if not user_address:
            secret = options["user_secret"] or os.getenv("USER_SECRET")
            if not secret:
                raise CommandError("Provide --user, --user-secret or set USER_SECRET.")
            try:
                user_address = decode_secret_to_account(secret).address
            except ValueError:
                raise CommandError("Invalid user secret.")

        services = get_services()
        try:
            user_address = validate_address(user_address)
            token_address = validate_address(options["token"])
            info = services.tokens.get_token_info(token_address)
            amount = scale_amount(options["amount"], info.decimals)
            result = services.loans.disburse_loan(user_address, token_address, amount)
        except LendingError as e:
            raise CommandError(e.message)

        self.stdout.write(
            self.style.SUCCESS(
                f"Loan {result.loan_id} disbursed to {user_address} "
                f"(tx: {result.tx_id}, record: {result.id})"
            )
        )
