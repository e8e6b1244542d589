from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from .account import Account
from .company import Company
from .currency import Currency
from .item import Item
from .tax_rate import TaxRate


class Document(models.Model):
    """
    Header fields shared by invoices and bills.

    All amounts are integer minor units. Totals are written by the
    document services from the line valuations and never recomputed
    by the model itself.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="%(class)ss")

    # Human number, e.g. "INV-2025-0001". Stays NULL while draft.
    number = models.CharField(max_length=32, null=True, blank=True)

    issue_date = models.DateField()
    due_date = models.DateField()
    currency = models.ForeignKey(
        Currency, on_delete=models.PROTECT, related_name="+")

    subtotal = models.BigIntegerField(default=0)
    tax_total = models.BigIntegerField(default=0)
    total = models.BigIntegerField(default=0)
    # total minus everything applied by payments
    balance = models.BigIntegerField(default=0)

    memo = models.TextField(null=True, blank=True)
    voided_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        constraints = [
            models.UniqueConstraint(
                fields=["company", "number"],
                name="uq_%(class)s_company_number",
            ),
            models.CheckConstraint(
                condition=models.Q(balance__gte=0)
                & models.Q(balance__lte=models.F("total")),
                name="%(class)s_balance_within_total",
            ),
        ]

    @property
    def amount_applied(self):
        return self.total - self.balance

    def clean(self):
        if self.subtotal + self.tax_total != self.total:
            raise ValidationError("total must equal subtotal + tax_total")
        # balance may only drop to zero through voiding or payments
        if self.balance < 0 or self.balance > self.total:
            raise ValidationError("balance must stay between 0 and total")
        if self.due_date and self.issue_date and self.due_date < self.issue_date:
            raise ValidationError("due_date cannot be before issue_date")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class DocumentLine(models.Model):
    """
    One valued line. Everything a posting needs is snapshotted here when
    the line is created: the tax percentage and the resolved account are
    never looked up again.
    """

    position = models.PositiveIntegerField(default=0)
    item = models.ForeignKey(
        Item, null=True, blank=True, on_delete=models.PROTECT, related_name="+"
    )
    description = models.CharField(max_length=400, default="Custom line")

    quantity = models.DecimalField(
        max_digits=14, decimal_places=4, default=Decimal("1"))
    unit_price = models.BigIntegerField()
    discount = models.BigIntegerField(default=0)

    # Which rate was picked (informational) and the percent it had then
    tax_rate = models.ForeignKey(
        TaxRate, null=True, blank=True, on_delete=models.SET_NULL,
        related_name="+"
    )
    tax_rate_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"))

    # Revenue / expense account resolved at creation
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="+")

    net_amount = models.BigIntegerField(default=0)
    tax_amount = models.BigIntegerField(default=0)
    line_total = models.BigIntegerField(default=0)

    class Meta:
        abstract = True
        ordering = ("position", "id")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0)
                & models.Q(discount__gte=0)
                & models.Q(net_amount__gte=0),
                name="%(class)s_valid_amounts",
            ),
        ]

    def __str__(self):
        return f"{self.description} x{self.quantity}: {self.line_total}"

    def clean(self):
        if self.net_amount + self.tax_amount != self.line_total:
            raise ValidationError("line_total must equal net + tax")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
