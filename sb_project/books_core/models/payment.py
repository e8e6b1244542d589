from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .bill import Bill
from .company import Company
from .customer import Customer
from .invoice import Invoice
from .vendor import Vendor


class PaymentDirection(models.TextChoices):
    AR = "ar", "Customer receipt"  # money in, settles invoices
    AP = "ap", "Vendor payment"  # money out, settles bills


class PaymentMethod(models.TextChoices):
    CASH = "cash", "Cash"
    BANK_TRANSFER = "bank_transfer", "Bank transfer"
    CARD = "card", "Card"
    MOBILE_PAY = "mobile_pay", "MobilePay"
    OTHER = "other", "Other"


class Payment(models.Model):
    """
    Money received from a customer or paid to a vendor.

    A payment is applied to one or more documents through InvoicePayment /
    BillPayment rows. A payment with no applications is a standalone
    receipt/disbursement and has no journal entry.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="payments")
    direction = models.CharField(
        max_length=2, choices=PaymentDirection.choices)
    method = models.CharField(
        max_length=20, choices=PaymentMethod.choices,
        default=PaymentMethod.OTHER
    )
    amount = models.BigIntegerField()  # minor units, > 0
    date = models.DateField()
    reference = models.CharField(max_length=200, null=True, blank=True)

    # Exactly one counterparty, matching the direction
    customer = models.ForeignKey(
        Customer, null=True, blank=True, on_delete=models.PROTECT,
        related_name="payments"
    )
    vendor = models.ForeignKey(
        Vendor, null=True, blank=True, on_delete=models.PROTECT,
        related_name="payments"
    )

    # Posting produced by this payment (Bank/AR or AP/Bank)
    journal_entry = models.OneToOneField(
        "JournalEntry",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="payment",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "date"], name="payment_company_date_idx"),
            models.Index(fields=["company", "direction"], name="payment_company_dir_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payment_positive_amount",
            ),
        ]
        ordering = ("-date", "-id")

    def __str__(self):
        return f"{self.get_direction_display()} {self.amount} on {self.date}"

    def clean(self):
        if self.direction == PaymentDirection.AR:
            if self.vendor_id:
                raise ValidationError("Customer receipts cannot name a vendor.")
            party = self.customer if self.customer_id else None
        else:
            if self.customer_id:
                raise ValidationError("Vendor payments cannot name a customer.")
            party = self.vendor if self.vendor_id else None
        # Prevent cross-company contamination
        if party is not None and party.company_id != self.company_id:
            raise ValidationError(
                "Counterparty must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)


class PaymentApplication(models.Model):
    """ Bridge row: how much of a payment settles one document """

    amount = models.BigIntegerField()

    class Meta:
        abstract = True
        constraints = [
            # Ensure applied amount is never zero or negative
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="%(class)s_positive_amount",
            ),
        ]

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class InvoicePayment(PaymentApplication):
    payment = models.ForeignKey(
        Payment, on_delete=models.CASCADE, related_name="invoice_applications")
    invoice = models.ForeignKey(
        Invoice, on_delete=models.PROTECT, related_name="payment_applications")

    class Meta(PaymentApplication.Meta):
        constraints = PaymentApplication.Meta.constraints + [
            # Each payment can be linked to the same invoice only once
            models.UniqueConstraint(
                fields=["payment", "invoice"], name="uq_payment_invoice"
            ),
        ]

    def __str__(self):
        return f"Payment {self.payment_id} → Inv {self.invoice.number}: {self.amount}"

    def clean(self):
        """ You can't accidentally link a payment
        from Company A to an Invoice from Company B. """
        if self.invoice.company_id != self.payment.company_id:
            raise ValidationError(
                "Invoice and payment must belong to same company")
        if self.payment.direction != PaymentDirection.AR:
            raise ValidationError("Only customer receipts settle invoices.")


class BillPayment(PaymentApplication):
    payment = models.ForeignKey(
        Payment, on_delete=models.CASCADE, related_name="bill_applications")
    bill = models.ForeignKey(
        Bill, on_delete=models.PROTECT, related_name="payment_applications")

    class Meta(PaymentApplication.Meta):
        constraints = PaymentApplication.Meta.constraints + [
            models.UniqueConstraint(
                fields=["payment", "bill"], name="uq_payment_bill"
            ),
        ]

    def __str__(self):
        return f"Payment {self.payment_id} → Bill {self.bill.number}: {self.amount}"

    def clean(self):
        if self.bill.company_id != self.payment.company_id:
            raise ValidationError(
                "Bill and payment must belong to same company")
        if self.payment.direction != PaymentDirection.AP:
            raise ValidationError("Only vendor payments settle bills.")
