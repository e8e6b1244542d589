from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .account import Account
from .company import Company


class JournalSource(models.TextChoices):
    # The business event that produced an entry
    INVOICE_ISSUE = "invoice_issue", "Invoice issued"
    INVOICE_PAYMENT = "invoice_payment", "Invoice payment"
    INVOICE_VOID = "invoice_void", "Invoice voided"
    BILL_APPROVE = "bill_approve", "Bill approved"
    BILL_PAYMENT = "bill_payment", "Bill payment"
    BILL_VOID = "bill_void", "Bill voided"
    MANUAL = "manual", "Manual entry"


# ---------- Journal (Header) & JournalLine ----------
class JournalEntry(models.Model):  # Represents one accounting transaction
    """
    Append-only. Entries are written once by services.posting.post()
    and corrected only by posting an offsetting entry.
    """

    # Multi-tenant: every entry belongs to a company
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="journal_entries")
    # Business metadata
    date = models.DateField()
    memo = models.CharField(max_length=400)
    source = models.CharField(max_length=20, choices=JournalSource.choices)
    # Id of the invoice/bill/payment the entry originated from
    source_id = models.BigIntegerField(null=True, blank=True)
    # Set on void entries: the issue/approve entry being mirrored
    reverses = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="reversals",
    )
    # Track user who created it
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # Speed up listing & filtering
        indexes = [
            models.Index(fields=["company", "date"], name="je_company_date_idx"),
            models.Index(fields=["company", "source", "source_id"],
                         name="je_company_source_idx"),
        ]
        verbose_name_plural = "journal entries"
        ordering = ("date", "id")

    def __str__(self):
        return f"JE {self.pk} {self.date} [{self.source}] {self.memo}"

    # Aggregate all debit and credit amounts across entry’s lines
    def compute_totals(self):
        """Return debits, credits sums for lines"""
        aggs = self.lines.aggregate(
            total_debit=models.Sum("debit"),
            total_credit=models.Sum("credit"),
        )
        return aggs["total_debit"] or 0, aggs["total_credit"] or 0

    # True if double-entry rule holds: total debits = total credits
    def is_balanced(self):
        debit, credit = self.compute_totals()
        return debit == credit

    def clean(self):
        if self.reverses_id and self.reverses.company_id != self.company_id:
            raise ValidationError(
                "A reversal must belong to the same company as its entry.")

    def save(self, *args, **kwargs):
        if self.pk and JournalEntry.objects.filter(pk=self.pk).exists():
            raise ValidationError(
                "Journal entries are append-only; post a reversal instead.")
        self.full_clean()
        super().save(*args, **kwargs)


class JournalLine(models.Model):  # Stores Lines ( credits / debits )

    # Belongs to company & a journal entry
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="journal_lines")
    entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )
    position = models.PositiveIntegerField(default=0)

    # Must point to one Account (can’t delete account if lines exist → PROTECT)
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="journal_lines")

    # Minor units; exactly one side is nonzero
    debit = models.BigIntegerField(default=0)
    credit = models.BigIntegerField(default=0)

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "account"], name="jl_company_account_idx"),
        ]
        ordering = ("entry", "position")

        constraints = [
            # Ensure debit/credit are never negative
            models.CheckConstraint(
                condition=models.Q(debit__gte=0) & models.Q(credit__gte=0),
                name="jl_non_negative_amounts",
            ),
            # One side only: never both, never neither
            models.CheckConstraint(
                condition=(
                    (models.Q(debit__gt=0) & models.Q(credit=0))
                    | (models.Q(credit__gt=0) & models.Q(debit=0))
                ),
                name="jl_exactly_one_side",
            ),
        ]

    def __str__(self):
        side = f"D {self.debit}" if self.debit else f"C {self.credit}"
        return f"JE {self.entry_id} #{self.position} {self.account.code}: {side}"

    def clean(self):
        # Tenancy check
        if self.account.company_id != self.company_id:
            raise ValidationError("Account must belong to the same company.")
        if self.entry.company_id != self.company_id:
            raise ValidationError(
                "JournalLine.company must match JournalEntry.company")

    def save(self, *args, **kwargs):
        if self.pk and JournalLine.objects.filter(pk=self.pk).exists():
            raise ValidationError("Posted journal lines are immutable.")
        self.full_clean()
        super().save(*args, **kwargs)
