from django.core.management.base import BaseCommand

from zakat.services import backfill_entitlement_units


class Command(BaseCommand):
    help = "Infer and store the unit (rice/cash) of entitlements saved without one."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Report the inferred units without saving.")

    def handle(self, *args, **options):
        res = backfill_entitlement_units(dry_run=options["dry_run"])
        if res.get("status") == "ok":
            self.stdout.write(self.style.SUCCESS(res["message"][0]))
        else:
            self.stdout.write(self.style.ERROR("Backfill failed. See details below."))
        for row in res["updated"]:
            self.stdout.write(f"{row['table']}#{row['id']}: {row['value']} -> {row['unit']}")
        for row in res["unknown_category"]:
            self.stdout.write(self.style.WARNING(
                f"{row['table']}#{row['id']}: category '{row['category_name']}' not found, guessed by threshold"
            ))
