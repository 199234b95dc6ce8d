"""Management command to compare stored balances with the transaction log."""

from django.core.management.base import BaseCommand, CommandError

from ginger.services import ledger


class Command(BaseCommand):
    help = "Recompute every balance from the transaction log and report mismatches"

    def add_arguments(self, parser):
        parser.add_argument(
            "--fail",
            action="store_true",
            help="Exit with an error when any discrepancy is found",
        )

    def handle(self, *args, **options):
        discrepancies = ledger.audit()

        for item in discrepancies:
            self.stdout.write(
                f"customer {item.customer_id}: stored={item.stored} "
                f"logged={item.logged} diff={item.difference:+d}"
            )

        if not discrepancies:
            self.stdout.write(self.style.SUCCESS("All balances match the transaction log."))
            return

        summary = f"{len(discrepancies)} balance(s) differ from the transaction log."
        if options["fail"]:
            raise CommandError(summary)
        self.stdout.write(self.style.WARNING(summary))
