from django.db import \
    models  # ORM base classes to define database tables as Python classes

from ..managers import TenantManager
from .company import Company


# ---------- Counterparties ----------
class Counterparty(models.Model):
    """Fields shared by customers (AR side) and vendors (AP side)."""

    # The legal or trade name
    name = models.CharField(max_length=200)
    email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=40, null=True, blank=True)
    vat_number = models.CharField(max_length=40, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    # Standard credit terms
    payment_terms_days = models.PositiveIntegerField(default=0)
    """ Example: If terms = 30 → document due 30 days after issue.
        Default 0 means due on the issue date. """

    # Hidden from pickers but kept for history
    is_archived = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)


# Represents client who receives invoices (AR side)
class Customer(Counterparty):
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="customers")

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["company", "name"], name="customer_company_name_idx")]
        # Enforce uniqueness per tenant
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_customer_name"
            ),
        ]
