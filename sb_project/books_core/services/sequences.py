import logging

from ..models import DocumentSequence, SequenceKind

logger = logging.getLogger(__name__)


def format_number(kind, year, value):
    """ "INV-2025-0001"; counters past 9999 simply grow wider. """
    prefix = SequenceKind(kind).label
    return f"{prefix}-{year}-{value:04d}"


def allocate(company, kind, issue_date):
    """
    Hand out the next number for (company, kind, year of issue_date).

    Must run inside ledger_mutation: the counter row is locked and bumped
    in the caller's transaction, so a rolled back mutation gives its number
    back and a committed number is never handed out twice.
    """
    year = issue_date.year
    seq, _ = DocumentSequence.objects.select_for_update().get_or_create(
        company=company, kind=kind, year=year)
    value = seq.next_value
    seq.next_value = value + 1
    seq.save(update_fields=["next_value"])

    number = format_number(kind, year, value)
    logger.debug("Allocated %s for company %s", number, company.pk)
    return number


def peek(company, kind, year):
    """Number the next allocation would return (no lock, no write)."""
    seq = DocumentSequence.objects.filter(
        company=company, kind=kind, year=year).first()
    return format_number(kind, year, seq.next_value if seq else 1)
