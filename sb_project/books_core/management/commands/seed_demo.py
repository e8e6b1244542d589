import datetime

from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.utils.text import slugify

from books_core.models import Company, Customer, Vendor
from books_core.services import (approve_bill, create_bill, create_invoice,
                                 issue_invoice, record_invoice_payment)


class Command(BaseCommand):
    help = "Seeds a demo company with a customer, an invoice, a payment and a bill."

    # Define command-line argument
    def add_arguments(self, parser):
        parser.add_argument(
            "--company",  # Define flag
            type=str,
            default="Demo ApS",
            help="Name of the demo company (default: Demo ApS)",
        )

    def handle(self, *args, **options):
        com_name = options["company"]  # Read argument from add_arguments()

        self.stdout.write(self.style.NOTICE(
            f"Seeding demo data for {com_name}..."))
        call_command("setup_company", com_name, stdout=self.stdout)
        company = Company.objects.get(slug=slugify(com_name))

        customer, _ = Customer.objects.get_or_create(
            company=company, name="Nordlys Café",
            defaults={"email": "hej@nordlys.example", "payment_terms_days": 14})
        vendor, _ = Vendor.objects.get_or_create(
            company=company, name="Papirhuset",
            defaults={"payment_terms_days": 30})

        today = datetime.date.today()
        # 2 × 100.00 DKK + 25% VAT = 250.00 DKK
        invoice = create_invoice(company.pk, {
            "customer": customer.pk,
            "issue_date": today,
            "lines": [{"description": "Consulting hours", "quantity": 2,
                       "unit_price": 10000, "tax_rate_percent": "25.00"}],
        })
        invoice = issue_invoice(company.pk, invoice.pk)
        record_invoice_payment(company.pk, invoice.pk, {
            "amount": 15000, "method": "bank_transfer", "date": today})

        bill = create_bill(company.pk, {
            "vendor": vendor.pk,
            "issue_date": today,
            "vendor_reference": "PH-1042",
            "lines": [{"description": "Printer paper", "quantity": 1,
                       "unit_price": 40000, "tax_rate_percent": "25.00"}],
        })
        bill = approve_bill(company.pk, bill.pk)

        self.stdout.write(self.style.SUCCESS(
            f"Demo data seeded: invoice {invoice.number}, bill {bill.number}"))
