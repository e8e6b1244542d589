import datetime

import pytest
from django.test import TestCase

from ..models import AccountType
from ..services import (account_balance, aging_report, create_invoice,
                        ensure_ledger_balanced, list_journal_entries,
                        post_manual_entry, record_invoice_payment,
                        trial_balance, void_invoice)
from ..services.reporting import aging_bucket, signed_balance
from .factories import LedgerSetupMixin


@pytest.mark.parametrize("days,bucket", [
    (0, "current"), (-3, "current"), (1, "1-30"), (30, "1-30"),
    (31, "31-60"), (60, "31-60"), (61, "61-90"), (90, "61-90"), (91, "90+"),
])
def test_aging_bucket_boundaries(days, bucket):
    assert aging_bucket(days) == bucket


def test_signed_balance_follows_normal_side():
    assert signed_balance(AccountType.ASSET, 100, 30) == 70
    assert signed_balance(AccountType.EXPENSE, 100, 30) == 70
    assert signed_balance(AccountType.INCOME, 30, 100) == 70
    assert signed_balance(AccountType.LIABILITY, 100, 30) == -70


class AgingReportTests(LedgerSetupMixin, TestCase):

    def test_invoice_45_days_overdue_lands_in_31_60(self):
        invoice = self.issued_invoice()
        report = aging_report(self.company, "invoice",
                              self.day + datetime.timedelta(days=45))
        self.assertEqual(report["buckets"]["31-60"], 25000)
        self.assertEqual(report["total"], 25000)
        row = report["rows"][0]
        self.assertEqual(row["number"], invoice.number)
        self.assertEqual(row["customer"], "Acme")
        self.assertEqual(row["days_overdue"], 45)

    def test_only_open_balances_are_aged(self):
        create_invoice(self.company.pk, self.invoice_payload())  # draft
        paid = self.issued_invoice()
        record_invoice_payment(self.company.pk, paid.pk, {"amount": 25000})
        voided = self.issued_invoice()
        void_invoice(self.company.pk, voided.pk)
        partial = self.issued_invoice()
        record_invoice_payment(self.company.pk, partial.pk, {"amount": 5000})

        report = aging_report(self.company, "invoice", self.day)
        self.assertEqual([r["id"] for r in report["rows"]], [partial.pk])
        self.assertEqual(report["buckets"]["current"], 20000)

    def test_documents_issued_after_as_of_are_ignored(self):
        self.issued_invoice(issue_date=datetime.date(2025, 6, 1))
        report = aging_report(self.company, "invoice", self.day)
        self.assertEqual(report["total"], 0)
        self.assertEqual(report["rows"], [])

    def test_payables_aging(self):
        self.approved_bill()
        report = aging_report(self.company, "bill",
                              self.day + datetime.timedelta(days=100))
        self.assertEqual(report["buckets"]["90+"], 50000)
        self.assertEqual(report["rows"][0]["vendor"], "Papirhuset")


class TrialBalanceTests(LedgerSetupMixin, TestCase):

    def test_equation_holds_after_business_events(self):
        post_manual_entry(self.company.pk, {
            "date": "2025-01-01",
            "lines": [{"account": "1010", "debit": 100000},
                      {"account": "3000", "credit": 100000}],
        })
        invoice = self.issued_invoice()
        record_invoice_payment(self.company.pk, invoice.pk, {"amount": 25000})
        self.approved_bill()

        report = trial_balance(self.company)
        self.assertTrue(report["equation_balanced"])
        self.assertEqual(report["total_debit"], report["total_credit"])
        totals = report["totals_by_type"]
        self.assertEqual(totals["income"], 20000)
        self.assertEqual(totals["expense"], 50000)
        self.assertEqual(totals["equity"], 100000)

        balances = {row["code"]: row["balance"] for row in report["rows"]}
        self.assertEqual(balances["1010"], 125000)
        self.assertEqual(balances["1100"], 0)
        self.assertEqual(balances["2100"], 50000)
        self.assertEqual(balances["2610"], 5000)

    def test_as_of_excludes_later_entries(self):
        self.issued_invoice()
        earlier = trial_balance(self.company, as_of=self.day - datetime.timedelta(days=1))
        self.assertEqual(earlier["total_debit"], 0)
        self.assertEqual(account_balance(self.account("1100"), as_of=self.day), 25000)

    def test_void_nets_to_zero(self):
        invoice = self.issued_invoice()
        void_invoice(self.company.pk, invoice.pk)
        report = trial_balance(self.company)
        self.assertTrue(all(row["balance"] == 0 for row in report["rows"]))
        self.assertEqual(report["total_debit"], 50000)


class LedgerCheckTests(LedgerSetupMixin, TestCase):

    def test_every_entry_balances(self):
        invoice = self.issued_invoice()
        record_invoice_payment(self.company.pk, invoice.pk, {"amount": 1000})
        self.approved_bill()
        self.assertEqual(ensure_ledger_balanced(self.company), 3)

    def test_journal_listing_filters(self):
        self.issued_invoice()
        self.approved_bill(issue_date=datetime.date(2025, 4, 2))
        self.assertEqual(len(list_journal_entries(self.company)), 2)
        self.assertEqual(
            len(list_journal_entries(self.company, account=self.account("2100"))), 1)
        self.assertEqual(
            len(list_journal_entries(self.company,
                                     date_from=datetime.date(2025, 4, 1))), 1)
        self.assertEqual(
            len(list_journal_entries(self.company,
                                     date_to=datetime.date(2025, 3, 31))), 1)
