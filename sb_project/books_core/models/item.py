from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .account import Account
from .company import Company
from .tax_rate import TaxRate


# ---------- Items ----------
class Item(models.Model):
    """
    Catalog entry used to pre-fill document lines.

    A line that references an item and omits description, unit price,
    tax percent or account gets them from here. Values are copied onto the
    line at creation, so later edits to the item never touch issued documents.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="items")
    sku = models.CharField(max_length=80, null=True, blank=True)
    name = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)

    # Default net price per unit, minor units
    unit_price = models.BigIntegerField(default=0)

    # Overrides for the 4000 Sales / 5300 Office Expenses defaults
    sales_account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="items_sales_account",
    )
    purchase_account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="items_purchase_account",
    )
    tax_rate = models.ForeignKey(
        TaxRate,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="items",
    )

    is_service = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)

    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["company", "name"],
                                name="item_company_name_idx")]
        constraints = [
            # SKU is optional, but unique inside one company when given
            models.UniqueConstraint(
                fields=["company", "sku"], name="uq_company_item_sku"),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="item_non_negative_price",
            ),
        ]

    def __str__(self):
        return f"{self.sku} {self.name}" if self.sku else self.name

    def clean(self):
        links = {
            "sales_account": self.sales_account,
            "purchase_account": self.purchase_account,
            "tax_rate": self.tax_rate,
        }
        for field, linked in links.items():
            if linked is not None and linked.company_id != self.company_id:
                raise ValidationError(
                    {field: "Must belong to the same company as the item."})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
