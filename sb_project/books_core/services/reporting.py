"""
Read side of the ledger: balances, trial balance, aging.

Everything is summed from journal lines; nothing here takes the writer
lock, and each report reads one committed snapshot.
"""
import logging
from collections import OrderedDict

from django.db import transaction
from django.db.models import F, Q, Sum
from django.db.models.functions import Coalesce

from ..exceptions import UnbalancedEntryError
from ..models import Account, AccountType, JournalEntry, JournalLine
from .documents import DOCUMENT_MODELS, document_kind

logger = logging.getLogger(__name__)

AGING_BUCKETS = ("current", "1-30", "31-60", "61-90", "90+")


def signed_balance(ac_type, debit, credit):
    """Positive on the account's normal side."""
    if ac_type in (AccountType.ASSET, AccountType.EXPENSE):
        return debit - credit
    return credit - debit


def _lines(company, as_of=None):
    qs = JournalLine.objects.filter(company=company)
    if as_of is not None:
        qs = qs.filter(entry__date__lte=as_of)
    return qs


def account_balance(account, as_of=None):
    sums = _lines(account.company, as_of).filter(account=account).aggregate(
        debit=Coalesce(Sum("debit"), 0), credit=Coalesce(Sum("credit"), 0))
    return signed_balance(account.ac_type, sums["debit"], sums["credit"])


def account_balances(company, as_of=None):
    """
    One row per account (active ones, plus inactive ones with activity):
    {"account", "code", "name", "type", "debit", "credit", "balance"}
    ordered by code.
    """
    sums = {
        row["account"]: row
        for row in _lines(company, as_of).values("account").annotate(
            debit=Sum("debit"), credit=Sum("credit"))
    }
    rows = []
    for account in Account.objects.for_company(company).order_by("code"):
        row = sums.get(account.pk)
        if row is None and not account.is_active:
            continue
        debit = row["debit"] if row else 0
        credit = row["credit"] if row else 0
        rows.append({
            "account": account.pk,
            "code": account.code,
            "name": account.name,
            "type": account.ac_type,
            "debit": debit,
            "credit": credit,
            "balance": signed_balance(account.ac_type, debit, credit),
        })
    return rows


def trial_balance(company, as_of=None):
    """
    Debit/credit sums per account up to as_of, totals per account type
    and the accounting equation check. An unbalanced equation is
    reported through ``equation_balanced``, not raised.
    """
    with transaction.atomic():
        rows = account_balances(company, as_of)

    by_type = OrderedDict((t.value, 0) for t in AccountType)
    for row in rows:
        by_type[row["type"]] += row["balance"]

    left = by_type[AccountType.ASSET] + by_type[AccountType.EXPENSE]
    right = (by_type[AccountType.LIABILITY] + by_type[AccountType.EQUITY]
             + by_type[AccountType.INCOME])
    total_debit = sum(row["debit"] for row in rows)
    total_credit = sum(row["credit"] for row in rows)
    balanced = left == right and total_debit == total_credit
    if not balanced:
        logger.error("Trial balance for company %s does not balance: %s vs %s",
                     company.pk, left, right)
    return {
        "as_of": as_of,
        "rows": rows,
        "totals_by_type": dict(by_type),
        "total_debit": total_debit,
        "total_credit": total_credit,
        "equation_balanced": balanced,
    }


def aging_bucket(days_overdue):
    if days_overdue <= 0:
        return "current"
    if days_overdue <= 30:
        return "1-30"
    if days_overdue <= 60:
        return "31-60"
    if days_overdue <= 90:
        return "61-90"
    return "90+"


def aging_report(company, kind, as_of):
    """
    Open receivables (kind=invoice) or payables (kind=bill) bucketed by
    days past due: max(0, as_of - due_date).
    """
    kind = document_kind(kind)
    model, _, _, party_field = DOCUMENT_MODELS[kind]
    docs = (model.objects.open_items(company)
            .filter(issue_date__lte=as_of)
            .select_related(party_field)
            .order_by("due_date", "id"))

    buckets = OrderedDict((name, 0) for name in AGING_BUCKETS)
    rows = []
    for doc in docs:
        days = max(0, (as_of - doc.due_date).days)
        bucket = aging_bucket(days)
        buckets[bucket] += doc.balance
        party = getattr(doc, party_field)
        rows.append({
            "id": doc.pk,
            "number": doc.number,
            party_field: party.name,
            "due_date": doc.due_date,
            "days_overdue": days,
            "bucket": bucket,
            "balance": doc.balance,
        })
    return {
        "kind": kind.value,
        "as_of": as_of,
        "buckets": dict(buckets),
        "total": sum(buckets.values()),
        "rows": rows,
    }


def ensure_ledger_balanced(company):
    """
    Re-check every entry of a company. Raises UnbalancedEntryError naming
    the first offending entry; returns the number of entries checked.
    """
    entries = JournalEntry.objects.filter(company=company).annotate(
        debits=Coalesce(Sum("lines__debit"), 0),
        credits=Coalesce(Sum("lines__credit"), 0),
    )
    broken = entries.filter(~Q(debits=F("credits"))).order_by("id").first()
    if broken is not None:
        logger.critical("Journal entry %s of company %s is unbalanced",
                        broken.pk, company.pk)
        raise UnbalancedEntryError(
            f"Journal entry {broken.pk} is unbalanced: "
            f"debits={broken.debits}, credits={broken.credits}"
        )
    return entries.count()


def list_journal_entries(company, account=None, date_from=None, date_to=None):
    qs = (JournalEntry.objects.for_company(company)
          .prefetch_related("lines__account"))
    if account is not None:
        qs = qs.filter(lines__account=account).distinct()
    if date_from is not None:
        qs = qs.filter(date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(date__lte=date_to)
    return list(qs.order_by("date", "id"))
