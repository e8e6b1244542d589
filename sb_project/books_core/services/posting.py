import logging
from collections import OrderedDict
from typing import NamedTuple

from django.db import transaction

from ..exceptions import UnbalancedEntryError, ValidationError
from ..models import (Account, JournalEntry, JournalLine, JournalSource,
                      PaymentDirection)
from .accounts import AccountRole, get_account, resolve_required
from .audit_helper import log_action
from .inputs import to_date
from .mutation import ledger_mutation

logger = logging.getLogger(__name__)


class PostingLine(NamedTuple):
    account: Account
    debit: int = 0
    credit: int = 0


def _is_amount(value):
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


# ----------------------------
# Journal posting engine
# ----------------------------
def post(company, *, date, memo, source, source_id=None, lines,
         reverses=None, user=None):
    """
    Validate and append one balanced journal entry.

    Runs inside the caller's ledger_mutation so the entry commits together
    with the document change that triggered it. Lines with both sides zero
    are dropped first. An unbalanced set of lines means a builder bug and
    raises UnbalancedEntryError, aborting the whole mutation.
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("post() must run inside ledger_mutation()")

    kept = []
    for i, line in enumerate(lines):
        if line.account is None:
            raise ValidationError("Journal line has no resolved account",
                                  field=f"lines.{i}.account")
        if line.account.company_id != company.pk:
            raise ValidationError("Journal line account belongs to another company",
                                  field=f"lines.{i}.account")
        if not _is_amount(line.debit) or not _is_amount(line.credit):
            raise ValidationError(
                "Debit and credit must be non-negative integers",
                field=f"lines.{i}")
        if line.debit and line.credit:
            raise ValidationError(
                "A journal line cannot carry both a debit and a credit",
                field=f"lines.{i}")
        if line.debit or line.credit:
            kept.append(line)

    if not kept:
        raise ValidationError("Journal entry requires at least one line",
                              field="lines")

    total_debit = sum(line.debit for line in kept)
    total_credit = sum(line.credit for line in kept)
    # Enforce double-entry rule: debits = credits
    if total_debit != total_credit:
        logger.critical(
            "Unbalanced %s entry for company %s (source_id=%s): debits=%s credits=%s",
            source, company.pk, source_id, total_debit, total_credit)
        raise UnbalancedEntryError(
            f"Journal not balanced: debits={total_debit}, credits={total_credit}"
        )

    entry = JournalEntry.objects.create(
        company=company,
        date=date,
        memo=memo,
        source=source,
        source_id=source_id,
        reverses=reverses,
        created_by=user if getattr(user, "pk", None) else None,
    )
    for position, line in enumerate(kept):
        JournalLine.objects.create(
            company=company,
            entry=entry,
            position=position,
            account=line.account,
            debit=line.debit,
            credit=line.credit,
        )

    log_action(action="post", instance=entry, user=user, changes={
        "source": source, "source_id": source_id, "amount": total_debit})
    logger.info("Posted JE %s (%s) for company %s: %s",
                entry.pk, source, company.pk, total_debit)
    return entry


# ----------------------------
# Line builders per business event
# ----------------------------
def group_by_account(doc_lines):
    """
    Sum net amounts per resolved account, ordered by account code.
    Accounts whose lines net to zero are left out.
    """
    sums = OrderedDict()
    for line in doc_lines:
        account = line.account
        if account.pk not in sums:
            sums[account.pk] = [account, 0]
        sums[account.pk][1] += line.net_amount
    grouped = sorted(sums.values(), key=lambda pair: pair[0].code)
    return [(account, amount) for account, amount in grouped if amount]


def invoice_issue_lines(company, invoice):
    """ Dr AR total / Cr Sales per account, Cr Output VAT """
    lines = [PostingLine(
        resolve_required(company, AccountRole.ACCOUNTS_RECEIVABLE),
        debit=invoice.total)]
    for account, amount in group_by_account(
            invoice.lines.select_related("account")):
        lines.append(PostingLine(account, credit=amount))
    if invoice.tax_total > 0:
        lines.append(PostingLine(
            resolve_required(company, AccountRole.OUTPUT_VAT),
            credit=invoice.tax_total))
    return lines


def bill_approve_lines(company, bill):
    """ Dr expense per account, Dr Input VAT / Cr AP total """
    lines = [
        PostingLine(account, debit=amount)
        for account, amount in group_by_account(
            bill.lines.select_related("account"))
    ]
    if bill.tax_total > 0:
        lines.append(PostingLine(
            resolve_required(company, AccountRole.INPUT_VAT),
            debit=bill.tax_total))
    lines.append(PostingLine(
        resolve_required(company, AccountRole.ACCOUNTS_PAYABLE),
        credit=bill.total))
    return lines


def payment_lines(company, direction, amount):
    bank = resolve_required(company, AccountRole.BANK)
    if direction == PaymentDirection.AR:
        # Dr Bank / Cr AR
        ar = resolve_required(company, AccountRole.ACCOUNTS_RECEIVABLE)
        return [PostingLine(bank, debit=amount), PostingLine(ar, credit=amount)]
    # Dr AP / Cr Bank
    ap = resolve_required(company, AccountRole.ACCOUNTS_PAYABLE)
    return [PostingLine(ap, debit=amount), PostingLine(bank, credit=amount)]


def reversal_lines(entry):
    """Mirror of a posted entry with debit and credit swapped."""
    return [
        PostingLine(line.account, debit=line.credit, credit=line.debit)
        for line in entry.lines.select_related("account").order_by("position")
    ]


def post_manual_entry(company_id, payload, user=None):
    """
    Post a hand-written journal entry.

    payload: {"date", "memo", "lines": [{"account", "debit", "credit"}]}
    where account is a chart code or id. Unlike the internal builders an
    unbalanced manual entry is the user's mistake, so it is reported as a
    ValidationError before the engine ever sees it.
    """
    with ledger_mutation(company_id) as company:
        raw_lines = payload.get("lines") or []
        if not isinstance(raw_lines, list) or len(raw_lines) < 2:
            raise ValidationError("A manual entry needs at least two lines",
                                  field="lines")
        lines = []
        for i, raw in enumerate(raw_lines):
            if not isinstance(raw, dict):
                raise ValidationError("Line must be an object",
                                      field=f"lines.{i}")
            account = get_account(company, raw.get("account"),
                                  field=f"lines.{i}.account")
            lines.append(PostingLine(
                account, debit=raw.get("debit", 0), credit=raw.get("credit", 0)))
        if not all(_is_amount(l.debit) and _is_amount(l.credit) for l in lines):
            raise ValidationError(
                "Debit and credit must be non-negative integers", field="lines")
        if sum(l.debit for l in lines) != sum(l.credit for l in lines):
            raise ValidationError("Debits and credits must balance",
                                  field="lines")
        return post(
            company,
            date=to_date(payload.get("date"), "date"),
            memo=payload.get("memo") or "Manual entry",
            source=JournalSource.MANUAL,
            lines=lines,
            user=user,
        )
