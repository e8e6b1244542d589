from django.test import TestCase

from ..exceptions import InvalidStateError, NotFoundError, ValidationError
from ..models import (Account, AccountType, BillStatus, Item, JournalEntry,
                      JournalSource)
from ..services import (approve_bill, create_bill, record_bill_payment,
                        transition, void_bill)
from .factories import LedgerSetupMixin, entry_rows


class BillLifecycleTests(LedgerSetupMixin, TestCase):

    def test_approve_numbers_and_posts_expense_vat_and_payable(self):
        bill = self.approved_bill(vendor_reference="PH-7781")
        self.assertEqual(bill.status, BillStatus.APPROVED)
        self.assertEqual(bill.number, "BILL-2025-0001")
        self.assertEqual(bill.vendor_reference, "PH-7781")
        self.assertIsNotNone(bill.approved_at)

        entry = JournalEntry.objects.get(
            source=JournalSource.BILL_APPROVE, source_id=bill.pk)
        self.assertEqual(entry_rows(entry), [
            ("5300", 40000, 0),
            ("5710", 10000, 0),
            ("2100", 0, 50000),
        ])

    def test_item_purchase_account_is_used(self):
        supplies = Account.objects.create(
            company=self.company, code="5400", name="Supplies",
            ac_type=AccountType.EXPENSE)
        item = Item.objects.create(company=self.company, name="Toner",
                                   unit_price=1500, purchase_account=supplies)
        bill = self.approved_bill(lines=[{"item": item.pk, "quantity": 2}])
        entry = JournalEntry.objects.get(source_id=bill.pk,
                                         source=JournalSource.BILL_APPROVE)
        self.assertEqual(entry_rows(entry), [("5400", 3000, 0), ("2100", 0, 3000)])

    def test_bill_and_invoice_sequences_are_independent(self):
        self.issued_invoice()
        self.assertEqual(self.approved_bill().number, "BILL-2025-0001")

    def test_bills_are_approved_not_issued(self):
        bill = create_bill(self.company.pk, self.bill_payload())
        with self.assertRaises(InvalidStateError):
            transition(self.company.pk, "bill", bill.pk, "issue")
        approve_bill(self.company.pk, bill.pk)
        with self.assertRaises(InvalidStateError):
            approve_bill(self.company.pk, bill.pk)

    def test_unknown_line_account(self):
        with self.assertRaises(NotFoundError) as ctx:
            create_bill(self.company.pk, self.bill_payload(lines=[
                {"description": "x", "quantity": 1, "unit_price": 10,
                 "account": "9999"}]))
        self.assertEqual(ctx.exception.field, "account")

    def test_full_payment_marks_paid(self):
        bill = self.approved_bill()
        record_bill_payment(self.company.pk, bill.pk,
                            {"amount": 50000, "date": self.day,
                             "method": "bank_transfer"})
        bill.refresh_from_db()
        self.assertEqual(bill.status, BillStatus.PAID)
        self.assertEqual(bill.balance, 0)
        entry = JournalEntry.objects.get(source=JournalSource.BILL_PAYMENT)
        self.assertEqual(entry_rows(entry), [("2100", 50000, 0), ("1010", 0, 50000)])

    def test_paid_bill_accepts_no_more_payments(self):
        bill = self.approved_bill()
        record_bill_payment(self.company.pk, bill.pk, {"amount": 50000})
        with self.assertRaises(InvalidStateError):
            record_bill_payment(self.company.pk, bill.pk, {"amount": 1})

    def test_draft_bill_cannot_be_paid(self):
        bill = create_bill(self.company.pk, self.bill_payload())
        with self.assertRaises(InvalidStateError):
            record_bill_payment(self.company.pk, bill.pk, {"amount": 100})

    def test_void_approved_bill_reverses_posting(self):
        bill = self.approved_bill()
        void_bill(self.company.pk, bill.pk, {"date": "2025-04-01"})
        reversal = JournalEntry.objects.get(source=JournalSource.BILL_VOID)
        self.assertEqual(entry_rows(reversal), [
            ("5300", 0, 40000),
            ("5710", 0, 10000),
            ("2100", 50000, 0),
        ])
        self.assertEqual(str(reversal.date), "2025-04-01")

    def test_void_rejects_bad_date(self):
        bill = self.approved_bill()
        with self.assertRaises(ValidationError) as ctx:
            void_bill(self.company.pk, bill.pk, {"date": "01/04/2025"})
        self.assertEqual(ctx.exception.field, "date")
        bill.refresh_from_db()
        self.assertEqual(bill.status, BillStatus.APPROVED)

    def test_fully_discounted_bill_cannot_be_approved(self):
        bill = create_bill(self.company.pk, self.bill_payload(lines=[
            {"description": "Sample", "quantity": 1, "unit_price": 5000,
             "discount": 5000, "tax_rate_percent": 25}]))
        self.assertEqual(bill.total, 0)
        with self.assertRaises(ValidationError):
            approve_bill(self.company.pk, bill.pk)
        bill.refresh_from_db()
        self.assertEqual(bill.status, BillStatus.DRAFT)
        self.assertIsNone(bill.number)
        self.assertFalse(JournalEntry.objects.exists())
