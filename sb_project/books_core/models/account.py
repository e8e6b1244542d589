from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company


class AccountType(models.TextChoices):
    # Used in Account model to classify general ledger accounts
    ASSET = "asset", "Asset"
    LIABILITY = "liability", "Liability"
    EQUITY = "equity", "Equity"
    INCOME = "income", "Income"
    EXPENSE = "expense", "Expense"


# Define whether the account normally increases
# on the debit side or credit side
NORMAL_BALANCE = [
    ("debit", "Debit"),
    ("credit", "Credit"),
]

# Assets/Expenses → Debit, Liabilities/Equity/Income → Credit
DEBIT_NORMAL_TYPES = (AccountType.ASSET, AccountType.EXPENSE)


class Account(models.Model):
    """
    Ledger account in a company's Chart of Accounts.
    - code is unique per company and is what the resolver looks up
    - ac_type decides where the balance lands in the trial balance
    - once a journal line references it, it can be neither disabled nor deleted
    """

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="accounts",
    )
    # Sort/group key in reports, e.g. "1100"
    code = models.CharField(max_length=32)
    name = models.CharField(max_length=200)  # "Accounts Receivable"

    ac_type = models.CharField(
        max_length=10,
        choices=AccountType.choices,
    )

    normal_balance = models.CharField(
        max_length=6,
        choices=NORMAL_BALANCE,
        default="debit",
    )

    # “soft deactivate” accounts (hide in UI, stop new postings)
    # without deleting history
    is_active = models.BooleanField(default=True)
    # Created by chart seeding and required by the posting engine
    is_system = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "ac_type"], name="account_company_type_idx"),
            models.Index(fields=["company", "code"], name="account_company_code_idx"),
        ]

        """ Each company defines its own chart of accounts.
               Codes repeat across companies but must be unique within one. """
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_account_code"
            )
        ]
        ordering = ("company", "code")

    def __str__(self):
        return f"{self.code} – {self.name}"

    @property
    def is_debit_normal(self):
        return self.ac_type in DEBIT_NORMAL_TYPES

    def save(self, *args, **kwargs):
        """Can’t disable accounts used in journal lines"""
        # normal balance always follows the account type
        self.normal_balance = "debit" if self.is_debit_normal else "credit"
        if self.pk:
            old = Account.objects.filter(pk=self.pk).first()
            # If account was active before, but now being set to inactive
            if old and old.is_active and not self.is_active:
                from .journal import JournalLine

                if JournalLine.objects.filter(account_id=self.pk).exists():
                    raise ValidationError(
                        "Cannot disable an account that is used in journal lines."
                    )
        self.full_clean()
        return super().save(*args, **kwargs)
