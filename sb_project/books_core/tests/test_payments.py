from django.test import TestCase

from ..exceptions import (InvalidStateError, PaymentExceedsBalanceError,
                          ValidationError)
from ..models import (Customer, InvoicePayment, InvoiceStatus, JournalEntry,
                      JournalSource, Payment, PaymentDirection)
from ..services import (apply_payment, create_invoice, record_invoice_payment,
                        void_invoice)
from .factories import LedgerSetupMixin, entry_rows


class InvoicePaymentTests(LedgerSetupMixin, TestCase):

    def pay(self, invoice, amount, **extra):
        payload = {"amount": amount, "date": self.day, **extra}
        return record_invoice_payment(self.company.pk, invoice.pk, payload)

    def test_partial_then_full_payment(self):
        invoice = self.issued_invoice()
        payment = self.pay(invoice, 10000, method="card", reference="R-1")
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, InvoiceStatus.PARTIALLY_PAID)
        self.assertEqual(invoice.balance, 15000)
        self.assertEqual(payment.customer, self.customer)
        self.assertEqual(payment.direction, PaymentDirection.AR)
        self.assertEqual(entry_rows(payment.journal_entry),
                         [("1010", 10000, 0), ("1100", 0, 10000)])

        self.pay(invoice, 15000)
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, InvoiceStatus.PAID)
        self.assertEqual(invoice.balance, 0)
        self.assertEqual(invoice.amount_applied, invoice.total)

    def test_overpayment_is_rejected_without_side_effects(self):
        invoice = self.issued_invoice()
        with self.assertRaises(PaymentExceedsBalanceError):
            self.pay(invoice, 25001)
        invoice.refresh_from_db()
        self.assertEqual(invoice.balance, 25000)
        self.assertFalse(Payment.objects.exists())
        self.assertEqual(JournalEntry.objects.count(), 1)

    def test_amount_must_be_positive_integer(self):
        invoice = self.issued_invoice()
        for bad in (0, -5, 10.5, "100", None):
            with self.assertRaises(ValidationError) as ctx:
                self.pay(invoice, bad)
            self.assertEqual(ctx.exception.field, "amount")

    def test_unknown_method(self):
        invoice = self.issued_invoice()
        with self.assertRaises(ValidationError) as ctx:
            self.pay(invoice, 100, method="barter")
        self.assertEqual(ctx.exception.field, "method")

    def test_void_invoice_cannot_be_paid(self):
        invoice = self.issued_invoice()
        void_invoice(self.company.pk, invoice.pk)
        with self.assertRaises(InvalidStateError):
            self.pay(invoice, 100)


class MultiApplicationTests(LedgerSetupMixin, TestCase):

    def receive(self, amount, applications, **extra):
        return apply_payment(self.company.pk, "invoice", payload={
            "amount": amount, "date": self.day,
            "applications": applications, **extra})

    def test_one_payment_settles_two_invoices_with_one_entry(self):
        first = self.issued_invoice()
        second = self.issued_invoice()
        payment = self.receive(35000, [
            {"document": first.pk, "amount": 25000},
            {"document": second.pk, "amount": 10000},
        ])
        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.status, InvoiceStatus.PAID)
        self.assertEqual(second.status, InvoiceStatus.PARTIALLY_PAID)
        self.assertEqual(second.balance, 15000)
        self.assertEqual(payment.invoice_applications.count(), 2)
        self.assertEqual(payment.customer, self.customer)
        self.assertEqual(
            JournalEntry.objects.filter(source=JournalSource.INVOICE_PAYMENT).count(), 1)
        self.assertEqual(entry_rows(payment.journal_entry),
                         [("1010", 35000, 0), ("1100", 0, 35000)])

    def test_applications_must_add_up(self):
        invoice = self.issued_invoice()
        with self.assertRaises(ValidationError) as ctx:
            self.receive(20000, [{"document": invoice.pk, "amount": 10000}])
        self.assertEqual(ctx.exception.field, "applications")

    def test_application_that_is_not_an_object(self):
        self.issued_invoice()
        with self.assertRaises(ValidationError) as ctx:
            self.receive(1000, [1])
        self.assertEqual(ctx.exception.field, "applications.0")
        self.assertFalse(Payment.objects.exists())

    def test_applications_must_be_a_list(self):
        invoice = self.issued_invoice()
        with self.assertRaises(ValidationError) as ctx:
            self.receive(1000, {"document": invoice.pk, "amount": 1000})
        self.assertEqual(ctx.exception.field, "applications")

    def test_same_document_twice_is_rejected(self):
        invoice = self.issued_invoice()
        with self.assertRaises(ValidationError):
            self.receive(2000, [
                {"document": invoice.pk, "amount": 1000},
                {"document": invoice.pk, "amount": 1000},
            ])

    def test_documents_of_different_customers_cannot_share_a_payment(self):
        other = Customer.objects.create(company=self.company, name="Globex")
        mine = self.issued_invoice()
        theirs = self.issued_invoice(customer=other.pk)
        with self.assertRaises(ValidationError):
            self.receive(2000, [
                {"document": mine.pk, "amount": 1000},
                {"document": theirs.pk, "amount": 1000},
            ])
        mine.refresh_from_db()
        self.assertEqual(mine.balance, 25000)
        self.assertFalse(InvoicePayment.objects.exists())

    def test_exceeding_one_application_rolls_back_all(self):
        first = self.issued_invoice()
        second = self.issued_invoice()
        with self.assertRaises(PaymentExceedsBalanceError):
            self.receive(30000, [
                {"document": first.pk, "amount": 1000},
                {"document": second.pk, "amount": 29000},
            ])
        first.refresh_from_db()
        self.assertEqual(first.balance, 25000)
        self.assertFalse(Payment.objects.exists())

    def test_standalone_payment_posts_nothing(self):
        payment = self.receive(5000, [], customer=self.customer.pk)
        self.assertEqual(payment.customer, self.customer)
        self.assertIsNone(payment.journal_entry)
        self.assertFalse(JournalEntry.objects.exists())

    def test_balance_equals_total_minus_applications(self):
        invoice = self.issued_invoice()
        for amount in (3000, 4500, 500):
            record_invoice_payment(self.company.pk, invoice.pk, {"amount": amount})
        invoice.refresh_from_db()
        applied = sum(invoice.payment_applications.values_list("amount", flat=True))
        self.assertEqual(invoice.balance, invoice.total - applied)
        self.assertEqual(invoice.balance, 17000)

    def test_draft_invoice_in_applications_is_invalid(self):
        draft = create_invoice(self.company.pk, self.invoice_payload())
        with self.assertRaises(InvalidStateError):
            self.receive(1000, [{"document": draft.pk, "amount": 1000}])
