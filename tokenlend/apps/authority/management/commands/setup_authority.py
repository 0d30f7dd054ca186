from django.core.management.base import BaseCommand, CommandError

from tokenlend.errors import LendingError
from tokenlend.services import get_services


class Command(BaseCommand):
    help = (
        "Set up the authority wallet: register it off-chain and top up its "
        "native balance to cover platform tx fees."
    )

    def handle(self, *args, **options):
        self.stdout.write("Setting up the authority/admin for this project..")
        try:
            address, funding_tx = get_services().authority.setup()
        except LendingError as e:
            raise CommandError(e.message)

        self.stdout.write(f"Authority restored from secret key. address: {address}")
        if funding_tx:
            self.stdout.write(f"Funded from faucet (tx: {funding_tx})")
        else:
            self.stdout.write("Balance already covers fees; no funding needed.")
        self.stdout.write(self.style.SUCCESS("Authority setup complete!"))
