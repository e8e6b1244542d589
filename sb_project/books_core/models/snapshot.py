from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .account import Account
from .company import Company


# ---------- Account Balance Snapshot (materialized) ----------
class AccountBalanceSnapshot(
    models.Model
):  # Summary snapshot written by the rebuild_balance_snapshots task

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="balance_snapshots")
    # Snapshot is for a specific GL account
    account = models.ForeignKey(
        Account, on_delete=models.CASCADE, related_name="snapshots")
    # Lines dated on or before this day are included
    snapshot_date = models.DateField()
    # Journal sums in minor units
    debit_total = models.BigIntegerField(default=0)
    credit_total = models.BigIntegerField(default=0)
    # Signed by the account's normal side
    balance = models.BigIntegerField(default=0)
    """ Example:
            Bank shows debit_total 25000, credit_total 0, balance 25000.
            Sales shows debit_total 0, credit_total 20000, balance 20000. """
    refreshed_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # “Get all account balances for Company A on 2025-08-31.”
        indexes = [models.Index(fields=["company", "snapshot_date"],
                                name="snapshot_company_date_idx")]

        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(debit_total__gte=0) &
                    models.Q(credit_total__gte=0)
                ),
                name="ab_snap_non_negative_amounts",
            ),
            # Do not store duplicate snapshots for the same account/date
            models.UniqueConstraint(
                fields=["company", "account", "snapshot_date"],
                name="uq_company_account_snapshot_date",
            ),
        ]

    def __str__(self):
        slug = self.company.slug
        acc = self.account.code
        return f"{slug} {self.snapshot_date} | {acc}: {self.balance}"

    def clean(self):
        # Ensure account chosen belongs to the same company
        ac = self.account
        if ac and ac.company_id != self.company_id:
            raise ValidationError("Account must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
