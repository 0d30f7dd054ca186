from django.core.management.base import BaseCommand
from eth_account import Account

from tokenlend.utils import encode_account_to_secret


class Command(BaseCommand):
    help = "Generate a keypair for TOP_AUTHORITY or a user wallet. Copy the output into .env."

    def handle(self, *args, **options):
        account = Account.create()
        self.stdout.write("Set the following to TOP_AUTHORITY in .env file:")
        self.stdout.write(encode_account_to_secret(account))
        self.stdout.write(self.style.SUCCESS(f"Address: {account.address}"))
