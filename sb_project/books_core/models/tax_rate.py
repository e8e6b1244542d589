from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Tax rates ----------
class TaxRate(models.Model):
    """Flat percentage (e.g. 25.00 for Danish VAT).

    Lines copy rate_percent when they are created, so editing a rate here
    never changes the totals of documents that already exist.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="tax_rates")
    name = models.CharField(max_length=100)  # "VAT 25%"
    rate_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_taxrate_name"
            ),
            models.CheckConstraint(
                condition=models.Q(rate_percent__gte=0),
                name="taxrate_non_negative_percent",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.rate_percent}%)"

    def clean(self):
        if self.rate_percent is not None and self.rate_percent < 0:
            raise ValidationError("Tax rate percentage must be >= 0")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
