from django.core.exceptions import ValidationError
from django.db import models
from ..managers import DocumentManager
from .document import Document, DocumentLine
from .vendor import Vendor


class BillStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    APPROVED = "approved", "Approved"  # numbered and posted to AP
    PARTIALLY_PAID = "partially_paid", "Partially paid"
    PAID = "paid", "Paid"
    VOID = "void", "Void"


class Bill(Document):  # Mirrors Invoice but for Accounts Payable (AP)

    vendor = models.ForeignKey(
        Vendor, on_delete=models.PROTECT, related_name="bills")

    status = models.CharField(
        max_length=20, choices=BillStatus.choices, default=BillStatus.DRAFT
    )
    # The supplier's own invoice number, as printed on their document
    vendor_reference = models.CharField(max_length=100, null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)

    objects = DocumentManager()

    class Meta(Document.Meta):
        indexes = [
            models.Index(fields=["company", "status"], name="bill_company_status_idx"),
            models.Index(fields=["company", "vendor"], name="bill_company_vendor_idx"),
        ]
        ordering = ("-issue_date", "-id")

    def __str__(self):
        return f"Bill {self.number or self.pk}"

    def clean(self):
        super().clean()
        if self.vendor_id and self.vendor.company_id != self.company_id:
            raise ValidationError("Vendor must belong to the same company.")
        if self.status == BillStatus.DRAFT and self.number:
            raise ValidationError("Draft bills carry no number.")


class BillLine(DocumentLine):

    bill = models.ForeignKey(
        Bill, on_delete=models.CASCADE, related_name="lines")

    class Meta(DocumentLine.Meta):
        indexes = [models.Index(fields=["bill", "position"], name="billline_position_idx")]
