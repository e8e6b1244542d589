import json

from django.test import TestCase

from ..exceptions import NotFoundError, ValidationError
from ..models import Company, Customer, Invoice
from ..services import (aging_report, create_invoice, issue_invoice,
                        ledger_mutation, record_invoice_payment,
                        seed_chart_of_accounts, trial_balance)
from .factories import LedgerSetupMixin


class TenantIsolationTests(LedgerSetupMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.other = Company.objects.create(
            name="Other ApS", slug="other-aps", default_currency=self.dkk)
        seed_chart_of_accounts(self.other)
        self.other_customer = Customer.objects.create(
            company=self.other, name="Acme")

    def test_manager_scopes_by_company(self):
        mine = self.issued_invoice()
        theirs = create_invoice(self.other.pk, self.invoice_payload(
            customer=self.other_customer.pk))
        self.assertEqual(list(Invoice.objects.for_company(self.company)), [mine])
        self.assertEqual(list(Invoice.objects.for_company(self.other)), [theirs])

    def test_customer_of_another_company_is_not_found(self):
        with self.assertRaises(NotFoundError):
            create_invoice(self.company.pk, self.invoice_payload(
                customer=self.other_customer.pk))

    def test_line_account_of_another_company_is_not_found(self):
        foreign = self.other.accounts.get(code="4000")
        with self.assertRaises(NotFoundError):
            create_invoice(self.company.pk, self.invoice_payload(lines=[
                {"description": "x", "quantity": 1, "unit_price": 100,
                 "account": foreign.pk}]))

    def test_sequences_are_per_company(self):
        self.issued_invoice()
        theirs = create_invoice(self.other.pk, self.invoice_payload(
            customer=self.other_customer.pk))
        theirs = issue_invoice(self.other.pk, theirs.pk)
        self.assertEqual(theirs.number, "INV-2025-0001")

    def test_payment_cannot_reach_another_companys_invoice(self):
        invoice = self.issued_invoice()
        with self.assertRaises(NotFoundError):
            record_invoice_payment(self.other.pk, invoice.pk, {"amount": 100})

    def test_reports_only_see_own_postings(self):
        self.issued_invoice()
        self.assertEqual(trial_balance(self.other)["total_debit"], 0)
        self.assertEqual(aging_report(self.other, "invoice", self.day)["rows"], [])

    def test_customer_model_rejects_cross_company_invoice(self):
        invoice = create_invoice(self.company.pk, self.invoice_payload())
        invoice.customer = self.other_customer
        with self.assertRaises(ValidationError):
            with ledger_mutation(self.company.pk):
                invoice.save()

    def test_api_uses_slug_scope(self):
        invoice = self.issued_invoice()
        resp = self.client.get(f"/api/companies/other-aps/invoices/{invoice.pk}/")
        self.assertEqual(resp.status_code, 404)
        resp = self.client.post(
            f"/api/companies/other-aps/invoices/{invoice.pk}/void/",
            data=json.dumps({}), content_type="application/json")
        self.assertEqual(resp.status_code, 404)
