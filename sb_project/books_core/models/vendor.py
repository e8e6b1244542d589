from django.db import models
from ..managers import TenantManager
from .company import Company
from .customer import Counterparty


class Vendor(Counterparty):  # Mirrors Customer but for Accounts Payable (AP)

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="vendors")

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["company", "name"], name="vendor_company_name_idx")]
        # Vendor names must be unique per company
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_vendor_name"
            ),
        ]
