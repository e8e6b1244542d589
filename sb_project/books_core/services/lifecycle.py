"""
Document status machine, kept free of database access.

    invoice: draft → issued → partially_paid → paid
    bill:    draft → approved → partially_paid → paid
    both:    any non-void state → void (only while nothing is paid)
"""
from django.db import models

from ..exceptions import AlreadyVoidError, InvalidStateError
from ..models import BillStatus, InvoiceStatus


class DocumentKind(models.TextChoices):
    INVOICE = "invoice", "Invoice"
    BILL = "bill", "Bill"


class Action(models.TextChoices):
    ISSUE = "issue", "Issue"  # invoices
    APPROVE = "approve", "Approve"  # bills
    PAY = "pay", "Apply payment"
    VOID = "void", "Void"


STATUSES = {
    DocumentKind.INVOICE: InvoiceStatus,
    DocumentKind.BILL: BillStatus,
}

# The action that takes a draft live, and the state it lands in
OPEN_ACTION = {
    DocumentKind.INVOICE: (Action.ISSUE, InvoiceStatus.ISSUED),
    DocumentKind.BILL: (Action.APPROVE, BillStatus.APPROVED),
}


def payable_statuses(kind):
    status = STATUSES[DocumentKind(kind)]
    return (OPEN_ACTION[DocumentKind(kind)][1], status.PARTIALLY_PAID)


def next_status(kind, status, action, balance=None, total=None):
    """
    Return the status a document moves to, or raise.

    For PAY, ``balance`` is the balance after the payment and ``total`` the
    document total. For VOID, ``balance``/``total`` are the current values;
    anything already paid blocks the void.
    """
    kind = DocumentKind(kind)
    status_cls = STATUSES[kind]
    open_action, open_status = OPEN_ACTION[kind]

    if status == status_cls.VOID:
        if action == Action.VOID:
            raise AlreadyVoidError(f"{kind.label} is already void")
        raise InvalidStateError(f"Cannot {action} a void {kind}")

    if action == open_action:
        if status != status_cls.DRAFT:
            raise InvalidStateError(
                f"{kind.label} must be in draft status to {action}")
        return open_status

    if action == Action.PAY:
        if status not in (open_status, status_cls.PARTIALLY_PAID):
            raise InvalidStateError(
                f"{kind.label} must be {open_status} before recording payments")
        if balance is None or total is None:
            raise ValueError("PAY needs the resulting balance and the total")
        return status_cls.PAID if balance == 0 else status_cls.PARTIALLY_PAID

    if action == Action.VOID:
        if balance is not None and total is not None and balance != total:
            raise InvalidStateError(
                f"{kind.label} has payments applied and cannot be voided")
        return status_cls.VOID

    raise InvalidStateError(f"Action {action} is not defined for a {kind}")
