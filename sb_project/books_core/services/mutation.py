import logging
import threading
from contextlib import contextmanager

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from ..exceptions import NotFoundError, ValidationError
from ..models import Company

logger = logging.getLogger(__name__)

# One writer per process, in submission order. The company row lock below
# extends the same guarantee across processes on databases that support it.
_WRITER_LOCK = threading.RLock()


def _first_message(exc):
    """Flatten a Django ValidationError into (message, field)."""
    if hasattr(exc, "error_dict"):
        field, errors = next(iter(exc.error_dict.items()))
        messages = [m for e in errors for m in e.messages]
        return (messages[0] if messages else str(exc)), (
            None if field == "__all__" else field)
    return (exc.messages[0] if exc.messages else str(exc)), None


@contextmanager
def ledger_mutation(company_id):
    """
    Run a state-changing operation as one all-or-nothing unit.

    Yields the locked Company. Any exception rolls back every write made
    inside the block (documents, numbers, journal lines, audit rows).
    Model-level validation errors come out as books ValidationError.
    """
    with _WRITER_LOCK:
        try:
            with transaction.atomic():
                try:
                    company = Company.objects.select_for_update().get(
                        pk=company_id)
                except Company.DoesNotExist:
                    raise NotFoundError(f"Company {company_id} not found")
                yield company
        except DjangoValidationError as exc:
            message, field = _first_message(exc)
            logger.info("Mutation rejected for company %s: %s",
                        company_id, message)
            raise ValidationError(message, field=field) from exc


def load_company(company_id):
    """Unlocked lookup for read paths."""
    try:
        return Company.objects.select_related("default_currency").get(
            pk=company_id)
    except Company.DoesNotExist:
        raise NotFoundError(f"Company {company_id} not found")
