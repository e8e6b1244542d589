from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.text import slugify

from books_core.models import Company, Currency
from books_core.services import seed_chart_of_accounts

# Minimal currency table for new installs
CURRENCIES = {
    "DKK": ("Danish Krone", "kr"),
    "EUR": ("Euro", "€"),
    "USD": ("US Dollar", "$"),
}


class Command(BaseCommand):
    help = "Create a company (if missing) and seed its chart of accounts."

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument("name", help="Company name, e.g. 'Demo ApS'")
        parser.add_argument(
            "--slug", default=None,
            help="URL slug (default: slugified name)")
        parser.add_argument(
            "--currency", default=settings.BOOKS_DEFAULT_CURRENCY,
            help="Default currency code (default: BOOKS_DEFAULT_CURRENCY)")

    @transaction.atomic
    def handle(self, *args, **options):
        name = options["name"]
        slug = options["slug"] or slugify(name)
        if not slug:
            raise CommandError(f"Cannot derive a slug from {name!r}")

        code = options["currency"].upper()
        label, symbol = CURRENCIES.get(code, (code, None))
        currency, _ = Currency.objects.get_or_create(
            code=code, defaults={"name": label, "symbol": symbol})

        company, created = Company.objects.get_or_create(
            slug=slug, defaults={"name": name, "default_currency": currency})
        seeded = seed_chart_of_accounts(company)

        verb = "Created" if created else "Found existing"
        self.stdout.write(self.style.SUCCESS(
            f"{verb} company '{company.name}' ({company.slug}); "
            f"{seeded} accounts added."))
