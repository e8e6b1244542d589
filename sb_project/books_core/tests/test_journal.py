from django.core.exceptions import ValidationError as DjangoValidationError
from django.test import TestCase

from ..exceptions import NotFoundError, UnbalancedEntryError, ValidationError
from ..models import (Account, AccountType, Company, JournalEntry, JournalLine,
                      JournalSource)
from ..services import (PostingLine, create_invoice, issue_invoice,
                        ledger_mutation, post, post_manual_entry,
                        seed_chart_of_accounts)
from ..services.posting import reversal_lines
from .factories import LedgerSetupMixin


class PostingEngineTests(LedgerSetupMixin, TestCase):

    def post(self, lines, **kwargs):
        with ledger_mutation(self.company.pk) as company:
            return post(company, date=self.day, memo="test",
                        source=JournalSource.MANUAL, lines=lines, **kwargs)

    def test_balanced_entry_is_appended_in_order(self):
        entry = self.post([
            PostingLine(self.account("1010"), debit=500),
            PostingLine(self.account("3000"), credit=500),
        ])
        lines = list(entry.lines.order_by("position"))
        self.assertEqual([l.account.code for l in lines], ["1010", "3000"])
        self.assertEqual(entry.compute_totals(), (500, 500))
        self.assertTrue(entry.is_balanced())

    def test_unbalanced_entry_raises_and_persists_nothing(self):
        with self.assertRaises(UnbalancedEntryError):
            self.post([
                PostingLine(self.account("1010"), debit=500),
                PostingLine(self.account("3000"), credit=400),
            ])
        self.assertFalse(JournalEntry.objects.exists())
        self.assertFalse(JournalLine.objects.exists())

    def test_zero_lines_are_dropped(self):
        entry = self.post([
            PostingLine(self.account("1010"), debit=500),
            PostingLine(self.account("2610"), debit=0, credit=0),
            PostingLine(self.account("3000"), credit=500),
        ])
        self.assertEqual(entry.lines.count(), 2)

    def test_only_zero_lines_is_a_validation_error(self):
        with self.assertRaises(ValidationError):
            self.post([PostingLine(self.account("1010"))])

    def test_line_with_both_sides_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.post([
                PostingLine(self.account("1010"), debit=5, credit=5),
            ])

    def test_negative_and_non_integer_amounts_are_rejected(self):
        for bad in (-1, 1.5, True):
            with self.assertRaises(ValidationError):
                self.post([
                    PostingLine(self.account("1010"), debit=bad),
                    PostingLine(self.account("3000"), credit=1),
                ])

    def test_account_of_another_company_is_rejected(self):
        other = Company.objects.create(
            name="Other ApS", slug="other", default_currency=self.dkk)
        seed_chart_of_accounts(other)
        with self.assertRaises(ValidationError):
            self.post([
                PostingLine(self.account("1010"), debit=1),
                PostingLine(Account.objects.get(company=other, code="3000"), credit=1),
            ])

    def test_entries_are_append_only(self):
        entry = self.post([
            PostingLine(self.account("1010"), debit=1),
            PostingLine(self.account("3000"), credit=1),
        ])
        entry.memo = "changed"
        with self.assertRaises(DjangoValidationError):
            entry.save()
        line = entry.lines.first()
        line.debit = 2
        with self.assertRaises(DjangoValidationError):
            line.save()

    def test_revenue_lines_are_grouped_by_account_and_ordered_by_code(self):
        Account.objects.create(company=self.company, code="4100",
                               name="Consulting", ac_type=AccountType.INCOME)
        invoice = create_invoice(self.company.pk, self.invoice_payload(lines=[
            {"description": "A", "quantity": 1, "unit_price": 1000, "account": "4100"},
            {"description": "B", "quantity": 1, "unit_price": 2000},
            {"description": "C", "quantity": 1, "unit_price": 3000, "account": "4100"},
        ]))
        issue_invoice(self.company.pk, invoice.pk)
        entry = JournalEntry.objects.get(source=JournalSource.INVOICE_ISSUE)
        rows = [(l.account.code, l.debit, l.credit)
                for l in entry.lines.order_by("position")]
        self.assertEqual(rows, [
            ("1100", 6000, 0),
            ("4000", 0, 2000),
            ("4100", 0, 4000),
        ])

    def test_reversal_lines_mirror_the_original(self):
        entry = self.post([
            PostingLine(self.account("1100"), debit=1250),
            PostingLine(self.account("4000"), credit=1000),
            PostingLine(self.account("2610"), credit=250),
        ])
        mirrored = [(l.account.code, l.debit, l.credit) for l in reversal_lines(entry)]
        self.assertEqual(mirrored, [
            ("1100", 0, 1250), ("4000", 1000, 0), ("2610", 250, 0)])


class ManualEntryTests(LedgerSetupMixin, TestCase):

    def test_manual_entry_by_account_code(self):
        entry = post_manual_entry(self.company.pk, {
            "date": "2025-01-01",
            "memo": "Owner contribution",
            "lines": [
                {"account": "1010", "debit": 100000},
                {"account": "3000", "credit": 100000},
            ],
        })
        self.assertEqual(entry.source, JournalSource.MANUAL)
        self.assertEqual(entry.memo, "Owner contribution")
        self.assertTrue(entry.is_balanced())

    def test_unbalanced_manual_entry_is_a_user_error(self):
        with self.assertRaises(ValidationError):
            post_manual_entry(self.company.pk, {
                "date": "2025-01-01",
                "lines": [
                    {"account": "1010", "debit": 100},
                    {"account": "3000", "credit": 90},
                ],
            })
        self.assertFalse(JournalEntry.objects.exists())

    def test_manual_entry_needs_two_lines(self):
        with self.assertRaises(ValidationError):
            post_manual_entry(self.company.pk, {
                "date": "2025-01-01",
                "lines": [{"account": "1010", "debit": 0}],
            })

    def test_manual_line_that_is_not_an_object(self):
        with self.assertRaises(ValidationError) as ctx:
            post_manual_entry(self.company.pk, {
                "date": "2025-01-01",
                "lines": [{"account": "1010", "debit": 100}, "3000"],
            })
        self.assertEqual(ctx.exception.field, "lines.1")
        self.assertFalse(JournalEntry.objects.exists())

    def test_unknown_account_is_reported_with_its_line(self):
        with self.assertRaises(NotFoundError) as ctx:
            post_manual_entry(self.company.pk, {
                "date": "2025-01-01",
                "lines": [
                    {"account": "1010", "debit": 100},
                    {"account": "7777", "credit": 100},
                ],
            })
        self.assertEqual(ctx.exception.field, "lines.1.account")
