import logging

from celery import shared_task
from django.db import models, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def verify_ledger(company_id):
    """
    Nightly consistency check: every entry balances and the trial balance
    satisfies the accounting equation. Returns a summary dict.
    """
    # import lazily to avoid circular imports at module import time
    from .exceptions import UnbalancedEntryError
    from .services import ensure_ledger_balanced, load_company, trial_balance

    company = load_company(company_id)
    summary = {"company": company.pk, "entries": 0, "balanced": True,
               "equation_balanced": True, "error": None}
    try:
        summary["entries"] = ensure_ledger_balanced(company)
    except UnbalancedEntryError as exc:
        # reported, not retried: this needs a human
        summary["balanced"] = False
        summary["error"] = exc.message
    summary["equation_balanced"] = trial_balance(company)["equation_balanced"]
    logger.info("Ledger verification for company %s: %s", company.pk, summary)
    return summary


@shared_task
def rebuild_balance_snapshots(company_id, as_of=None):
    """Rewrite AccountBalanceSnapshot rows for one day (default: today)."""
    from .models import Account, AccountBalanceSnapshot, JournalLine
    from .services.reporting import signed_balance

    snapshot_date = parse_date(as_of) if isinstance(as_of, str) else as_of
    snapshot_date = snapshot_date or timezone.localdate()

    with transaction.atomic():
        # Sum all debit and credit lines per account in one query
        sums = {
            row["account"]: row
            for row in JournalLine.objects.filter(
                company_id=company_id, entry__date__lte=snapshot_date
            ).values("account").annotate(
                debit=models.Sum("debit"), credit=models.Sum("credit"))
        }
        # Wipe out any previous snapshots for this company and day
        AccountBalanceSnapshot.objects.filter(
            company_id=company_id, snapshot_date=snapshot_date).delete()

        written = 0
        for account in Account.objects.filter(company_id=company_id):
            row = sums.get(account.pk, {})
            debit = row.get("debit") or 0
            credit = row.get("credit") or 0
            AccountBalanceSnapshot.objects.create(
                company_id=company_id,
                account=account,
                snapshot_date=snapshot_date,
                debit_total=debit,
                credit_total=credit,
                balance=signed_balance(account.ac_type, debit, credit),
            )
            written += 1
    logger.info("Rebuilt %d balance snapshots for company %s on %s",
                written, company_id, snapshot_date)
    return written
