from django.core.management.base import BaseCommand, CommandError

from tokenlend.errors import LendingError
from tokenlend.services import get_services
from tokenlend.utils import scale_amount


class Command(BaseCommand):
    help = (
        "Create a new token, mint its initial supply into an authority-owned "
        "holding account and register it off-chain."
    )

    def add_arguments(self, parser):
        parser.add_argument("--name", default="StreamflowX", help="Token name.")
        parser.add_argument("--decimals", type=int, default=9, help="Token decimals (0-18).")
        parser.add_argument(
            "--supply",
            default="100000000",
            help="Initial supply in whole tokens (scaled by --decimals).",
        )

    def handle(self, *args, **options):
        name = options["name"]
        decimals = options["decimals"]
        services = get_services()

        self.stdout.write(f"Minting {name} token. This might take a while...")
        try:
            supply = scale_amount(options["supply"], decimals)
            result = services.tokens.setup_token(
                decimals=decimals,
                name=name,
                payer=services.authority.address,
                supply=supply,
            )
        except LendingError as e:
            raise CommandError(e.message)

        rows = [
            ("Off-chain token ID", result.id),
            ("Token address", result.token_address),
            ("Holding account", result.holding_address),
            ("Authority", services.authority.address),
        ]
        width = max(len(label) for label, _ in rows)
        for label, value in rows:
            self.stdout.write(f"{label.ljust(width)}  {value}")
        self.stdout.write(self.style.SUCCESS("Token setup complete!"))
