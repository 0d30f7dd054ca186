from django.core.management.base import BaseCommand, CommandError

from tokenlend.errors import LendingError
from tokenlend.services import get_services
from tokenlend.utils import scale_amount, validate_address


class Command(BaseCommand):
    help = "Mint more supply of a registered token into its holding account."

    def add_arguments(self, parser):
        parser.add_argument("address", help="Token address.")
        parser.add_argument("amount", help="Amount in whole tokens.")

    def handle(self, *args, **options):
        services = get_services()
        try:
            token_address = validate_address(options["address"])
            info = services.tokens.get_token_info(token_address)
            amount = scale_amount(options["amount"], info.decimals)
            tx_hash = services.tokens.mint(token_address, amount)
        except LendingError as e:
            raise CommandError(e.message)

        self.stdout.write(
            self.style.SUCCESS(f"Minted {options['amount']} {info.name} (tx: {tx_hash})")
        )
