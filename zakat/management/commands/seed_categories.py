# zakat/management/commands/seed_categories.py
from django.core.management.base import BaseCommand

from zakat.calculator import Unit
from zakat.conf import DEFAULT_CATEGORIES, GRAIN_PER_HEAD
from zakat.models import Category


class Command(BaseCommand):
    help = "Seed the Category table with the eight asnaf, each entitled to one head of rice."

    def handle(self, *args, **options):
        self.stdout.write(self.style.NOTICE("Seeding categories..."))

        for name in DEFAULT_CATEGORIES:
            # kategori yang sudah ada tidak disentuh (hak & satuannya milik pengguna)
            obj, created = Category.objects.get_or_create(
                name=name,
                defaults={
                    "base_entitlement": GRAIN_PER_HEAD,
                    "unit": Unit.WEIGHT.value,
                },
            )
            if created:
                self.stdout.write(f"Created: {name} ({obj.base_entitlement} kg)")
            else:
                self.stdout.write(f"Exists: {name} (kept as is)")

        self.stdout.write(self.style.SUCCESS("Category table seeded successfully."))
