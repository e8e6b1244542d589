from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company
from .currency import Currency
from .customer import Customer
from .document import DocumentLine


class SalesOrderStatus(models.TextChoices):
    DRAFT = "draft", "Draft"  # still editable
    CONFIRMED = "confirmed", "Confirmed"  # agreed with the customer
    INVOICED = "invoiced", "Invoiced"  # turned into a draft invoice


class SalesOrder(models.Model):
    """
    A quote/order that never touches the ledger.
    Its number (SO-YYYY-NNNN) is allocated on creation.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="sales_orders")
    customer = models.ForeignKey(
        Customer, on_delete=models.PROTECT, related_name="sales_orders")
    number = models.CharField(max_length=32)
    status = models.CharField(
        max_length=20,
        choices=SalesOrderStatus.choices,
        default=SalesOrderStatus.DRAFT,
    )
    issue_date = models.DateField()
    due_date = models.DateField()
    currency = models.ForeignKey(
        Currency, on_delete=models.PROTECT, related_name="+")
    notes = models.TextField(null=True, blank=True)

    # Cached totals of the lines (minor units)
    subtotal = models.BigIntegerField(default=0)
    tax_total = models.BigIntegerField(default=0)
    total = models.BigIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "number"], name="uq_salesorder_company_number"
            )
        ]
        ordering = ("-issue_date", "-id")

    def __str__(self):
        return self.number

    def clean(self):
        if self.customer_id and self.customer.company_id != self.company_id:
            raise ValidationError("Customer must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class SalesOrderLine(DocumentLine):

    sales_order = models.ForeignKey(
        SalesOrder, on_delete=models.CASCADE, related_name="lines")

    class Meta(DocumentLine.Meta):
        pass
