# accounting/management/commands/seed_store_accounts.py

from django.core.management.base import BaseCommand, CommandError

from accounting.services.account_service import initialize_standard_accounts
from accounting.services.exceptions import AccountingServiceError
from store.models import Store


class Command(BaseCommand):
    help = "Seed the standard system accounts for one store (or every store)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--store",
            dest="store_uuid",
            help="Store uuid (e.g. STR-xxxx). Omit to seed every active store.",
        )

    def handle(self, *args, **options):
        store_uuid = (options.get("store_uuid") or "").strip()

        if store_uuid:
            store_uuids = [store_uuid]
        else:
            store_uuids = list(
                Store.objects.filter(is_active=True).values_list("uuid", flat=True)
            )

        if not store_uuids:
            self.stdout.write("No stores to seed.")
            return

        for uuid in store_uuids:
            try:
                created = initialize_standard_accounts(store_uuid=uuid)
            except AccountingServiceError as exc:
                raise CommandError(str(exc)) from exc

            self.stdout.write(
                self.style.SUCCESS(f"✔ {uuid}: {len(created)} new system accounts.")
            )
