from django.core.exceptions import ValidationError
from django.db import models
from ..managers import DocumentManager
from .customer import Customer
from .document import Document, DocumentLine


class InvoiceStatus(models.TextChoices):
    DRAFT = "draft", "Draft"  # not yet finalized, nothing posted
    ISSUED = "issued", "Issued"  # numbered and posted to AR
    PARTIALLY_PAID = "partially_paid", "Partially paid"
    PAID = "paid", "Paid"  # fully settled
    VOID = "void", "Void"  # cancelled by a reversing entry


class Invoice(Document):  # Represents a customer invoice (AR side)

    # prevent deleting customer who has an invoice
    customer = models.ForeignKey(
        Customer, on_delete=models.PROTECT, related_name="invoices")

    status = models.CharField(
        max_length=20, choices=InvoiceStatus.choices,
        default=InvoiceStatus.DRAFT
    )
    # Set when the invoice was produced from a confirmed sales order
    sales_order = models.ForeignKey(
        "SalesOrder",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="invoices",
    )
    issued_at = models.DateTimeField(null=True, blank=True)

    objects = DocumentManager()

    class Meta(Document.Meta):
        # Optimize for fast lookups by status or customer
        indexes = [
            models.Index(fields=["company", "status"], name="invoice_company_status_idx"),
            models.Index(fields=["company", "customer"], name="invoice_company_cust_idx"),
        ]
        ordering = ("-issue_date", "-id")

    def __str__(self):
        # If no invoice number, fall back to database ID
        return f"Inv {self.number or self.pk}"

    def clean(self):
        super().clean()
        # Ensure customer chosen belongs to the same company
        if self.customer_id and self.customer.company_id != self.company_id:
            raise ValidationError("Customer must belong to the same company.")
        if self.status == InvoiceStatus.DRAFT and self.number:
            raise ValidationError("Draft invoices carry no number.")


class InvoiceLine(DocumentLine):
    """ Each line describes a product/service sold on the invoice """

    invoice = models.ForeignKey(
        Invoice, on_delete=models.CASCADE, related_name="lines")

    class Meta(DocumentLine.Meta):
        indexes = [models.Index(fields=["invoice", "position"], name="invoiceline_position_idx")]
