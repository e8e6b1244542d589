import logging
from decimal import Decimal
from enum import Enum

from ..exceptions import AccountNotConfiguredError, NotFoundError
from ..models import Account, AccountType, TaxRate

logger = logging.getLogger(__name__)


class AccountRole(Enum):
    """Logical account a posting needs, with its default chart code."""

    BANK = "1010"
    ACCOUNTS_RECEIVABLE = "1100"
    ACCOUNTS_PAYABLE = "2100"
    OUTPUT_VAT = "2610"
    SALES = "4000"
    OPERATING_EXPENSES = "5300"
    INPUT_VAT = "5710"

    @property
    def code(self):
        return self.value


# Must exist before anything is posted for a company
SYSTEM_ROLES = (
    AccountRole.BANK,
    AccountRole.ACCOUNTS_RECEIVABLE,
    AccountRole.ACCOUNTS_PAYABLE,
    AccountRole.OUTPUT_VAT,
    AccountRole.INPUT_VAT,
)

# (code, name, type) seeded by setup_company
DEFAULT_CHART = [
    ("1010", "Bank", AccountType.ASSET),
    ("1100", "Accounts Receivable", AccountType.ASSET),
    ("2100", "Accounts Payable", AccountType.LIABILITY),
    ("2610", "Output VAT", AccountType.LIABILITY),
    ("3000", "Owner Equity", AccountType.EQUITY),
    ("4000", "Sales", AccountType.INCOME),
    ("5300", "Office Expenses", AccountType.EXPENSE),
    ("5710", "Input VAT", AccountType.EXPENSE),
]

DEFAULT_TAX_RATE = ("VAT 25%", Decimal("25.00"))


def _code_of(role_or_code):
    return role_or_code.code if isinstance(role_or_code, AccountRole) else str(role_or_code)


def resolve_required(company, role_or_code):
    """
    Active account for a role (its default code) or a literal code.
    A missing account is a setup problem, never a user error.
    """
    code = _code_of(role_or_code)
    account = Account.objects.active(company).filter(code=code).first()
    if account is None:
        logger.error("Account %s is not configured for company %s",
                     code, company.pk)
        raise AccountNotConfiguredError(
            f"Required account {code} is not configured for company {company.slug}"
        )
    return account


def get_account(company, override, field="account"):
    # Accept an Account instance, a primary key or a chart code
    if isinstance(override, Account):
        account = override if override.company_id == company.pk else None
    else:
        qs = Account.objects.for_company(company)
        account = (qs.filter(pk=override).first() if isinstance(override, int)
                   else qs.filter(code=str(override)).first())
    if account is None or not account.is_active:
        raise NotFoundError(f"Account {override} not found", field=field)
    return account


def resolve_line_account(company, role, override=None, item=None):
    """
    Account a document line posts to:
    explicit override → item's sales/purchase account → role default.
    """
    if override not in (None, ""):
        return get_account(company, override)
    if item is not None:
        attached = (item.sales_account if role == AccountRole.SALES
                    else item.purchase_account)
        if attached is not None and attached.is_active:
            return attached
    return resolve_required(company, role)


def ensure_system_accounts(company):
    """Fail with every missing system code at once."""
    codes = [role.code for role in SYSTEM_ROLES]
    present = set(
        Account.objects.active(company).filter(code__in=codes)
        .values_list("code", flat=True)
    )
    missing = [code for code in codes if code not in present]
    if missing:
        logger.error("Company %s is missing system accounts %s",
                     company.pk, ", ".join(missing))
        raise AccountNotConfiguredError(
            f"Company {company.slug} is missing system accounts: {', '.join(missing)}"
        )


def seed_chart_of_accounts(company):
    """Create the default chart and VAT rate. Safe to run again."""
    created = 0
    for code, name, ac_type in DEFAULT_CHART:
        _, was_created = Account.objects.get_or_create(
            company=company,
            code=code,
            defaults={"name": name, "ac_type": ac_type, "is_system": True},
        )
        created += was_created
    name, percent = DEFAULT_TAX_RATE
    TaxRate.objects.get_or_create(
        company=company, name=name, defaults={"rate_percent": percent})
    logger.info("Seeded chart of accounts for company %s (%d new accounts)",
                company.pk, created)
    return created
