from django.core.management.base import BaseCommand, CommandError

from tokenlend.services import get_services


class Command(BaseCommand):
    help = "Delete all loans, their transactions and borrowers for a fresh start."

    def add_arguments(self, parser):
        parser.add_argument(
            "--yes", action="store_true", help="Confirm the deletion."
        )

    def handle(self, *args, **options):
        if not options["yes"]:
            raise CommandError("Refusing to delete loan data without --yes.")

        counts = get_services().loans.reset_loans()
        self.stdout.write(
            self.style.WARNING(
                f"Deleted {counts['txs']} txs, {counts['loans']} loans, {counts['users']} users."
            )
        )
