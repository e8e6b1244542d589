import logging
from typing import Optional

from ..models import AuditLog, Company

logger = logging.getLogger(__name__)


def log_action(
    *,
    action: str,
    instance,
    user=None,
    company: Optional[Company] = None,
    changes: dict | None = None,
) -> AuditLog:
    """
    Record one AuditLog row for a mutation on `instance`.

    Must run inside ledger_mutation so the row shares the mutation's
    transaction. The company defaults to instance.company.
    """
    company = company or getattr(instance, "company", None)

    # AnonymousUser has no pk
    actor = user if getattr(user, "pk", None) else None

    entry = AuditLog.objects.create(
        company=company,
        user=actor,
        action=action,
        object_type=type(instance).__name__,
        object_id=str(instance.pk),
        changes=changes,
    )
    logger.debug("audit %s %s(%s) by %s", action, entry.object_type,
                 entry.object_id, actor or "system")
    return entry
