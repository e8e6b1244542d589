from django.db import models
from .company import Company


class SequenceKind(models.TextChoices):
    # value = document kind, label = number prefix
    INVOICE = "invoice", "INV"
    BILL = "bill", "BILL"
    SALES_ORDER = "sales_order", "SO"


class DocumentSequence(models.Model):
    """Per company, per kind, per calendar year counter.

    next_value is the number the next allocation hands out. Rows are only
    touched under select_for_update inside a ledger mutation.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="sequences")
    kind = models.CharField(max_length=20, choices=SequenceKind.choices)
    year = models.PositiveSmallIntegerField()
    next_value = models.PositiveIntegerField(default=1)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "kind", "year"],
                name="uq_company_sequence_kind_year",
            )
        ]

    def __str__(self):
        return f"{self.company_id} {self.kind} {self.year}: next {self.next_value}"
