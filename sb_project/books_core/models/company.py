from django.core.exceptions import ValidationError
from django.db import models


# ---------- Tenant / Company ----------
class Company(models.Model):

    """Organization that owns a chart of accounts and a ledger.

    The company row doubles as the write lock for ledger mutations:
    services select it FOR UPDATE before touching documents or the journal.
    """
    name = models.CharField(max_length=200)

    slug = models.SlugField(  # A URL-friendly identifier
        max_length=80, unique=True  # no two companies can have the same slug
    )

    # don’t allow deleting a currency that a company depends on
    default_currency = models.ForeignKey(
        "Currency",
        on_delete=models.PROTECT,
        related_name="companies",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name

    def clean(self):
        if not self.slug:
            raise ValidationError("Company slug is required")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
