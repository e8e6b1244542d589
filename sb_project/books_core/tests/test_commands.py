from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from ..models import (Account, Bill, Company, Invoice, JournalEntry, TaxRate)
from ..services import ensure_ledger_balanced


class SetupCompanyCommandTests(TestCase):

    def test_creates_company_with_chart(self):
        out = StringIO()
        call_command("setup_company", "Hygge Bageri", "--currency", "eur",
                     stdout=out)
        company = Company.objects.get(slug="hygge-bageri")
        self.assertEqual(company.default_currency.code, "EUR")
        self.assertEqual(Account.objects.filter(company=company).count(), 8)
        self.assertTrue(TaxRate.objects.filter(company=company,
                                               name="VAT 25%").exists())
        self.assertIn("8 accounts added", out.getvalue())

    def test_is_idempotent(self):
        call_command("setup_company", "Hygge Bageri", stdout=StringIO())
        out = StringIO()
        call_command("setup_company", "Hygge Bageri", stdout=out)
        self.assertEqual(Company.objects.count(), 1)
        self.assertIn("0 accounts added", out.getvalue())


class SeedDemoCommandTests(TestCase):

    def test_seeds_a_balanced_demo_ledger(self):
        out = StringIO()
        call_command("seed_demo", "--company", "Demo ApS", stdout=out)
        company = Company.objects.get(slug="demo-aps")
        invoice = Invoice.objects.get(company=company)
        self.assertEqual(invoice.status, "partially_paid")
        self.assertEqual(invoice.balance, 10000)
        self.assertEqual(Bill.objects.get(company=company).status, "approved")
        self.assertEqual(JournalEntry.objects.filter(company=company).count(), 3)
        self.assertEqual(ensure_ledger_balanced(company), 3)
        self.assertIn(invoice.number, out.getvalue())
