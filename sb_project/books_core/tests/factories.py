import datetime

from ..models import Account, Company, Currency, Customer, Vendor
from ..services import (approve_bill, create_bill, create_invoice,
                        issue_invoice, seed_chart_of_accounts)


class LedgerSetupMixin:
    """Company with the default chart, one customer and one vendor."""

    day = datetime.date(2025, 3, 10)

    def setUp(self):
        super().setUp()
        self.dkk = Currency.objects.create(
            code="DKK", name="Danish Krone", symbol="kr")
        self.company = Company.objects.create(
            name="Test ApS", slug="test-aps", default_currency=self.dkk)
        seed_chart_of_accounts(self.company)
        self.customer = Customer.objects.create(
            company=self.company, name="Acme")
        self.vendor = Vendor.objects.create(
            company=self.company, name="Papirhuset")

    def account(self, code):
        return Account.objects.get(company=self.company, code=code)

    def invoice_payload(self, **overrides):
        payload = {
            "customer": self.customer.pk,
            "issue_date": self.day,
            "lines": [{"description": "Consulting", "quantity": 2,
                       "unit_price": 10000, "tax_rate_percent": 25}],
        }
        payload.update(overrides)
        return payload

    def bill_payload(self, **overrides):
        payload = {
            "vendor": self.vendor.pk,
            "issue_date": self.day,
            "lines": [{"description": "Printer paper", "quantity": 1,
                       "unit_price": 40000, "tax_rate_percent": 25}],
        }
        payload.update(overrides)
        return payload

    def issued_invoice(self, **overrides):
        invoice = create_invoice(self.company.pk, self.invoice_payload(**overrides))
        return issue_invoice(self.company.pk, invoice.pk)

    def approved_bill(self, **overrides):
        bill = create_bill(self.company.pk, self.bill_payload(**overrides))
        return approve_bill(self.company.pk, bill.pk)


def entry_rows(entry):
    """(code, debit, credit) per line in posting order."""
    return [(l.account.code, l.debit, l.credit)
            for l in entry.lines.select_related("account").order_by("position")]
