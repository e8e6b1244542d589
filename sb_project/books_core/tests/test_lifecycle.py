import pytest

from ..exceptions import AlreadyVoidError, InvalidStateError
from ..models import BillStatus, InvoiceStatus
from ..services.lifecycle import Action, DocumentKind, next_status

INV = DocumentKind.INVOICE
BILL = DocumentKind.BILL


@pytest.mark.parametrize("kind,action,expected", [
    (INV, Action.ISSUE, InvoiceStatus.ISSUED),
    (BILL, Action.APPROVE, BillStatus.APPROVED),
    (INV, Action.VOID, InvoiceStatus.VOID),
    (BILL, Action.VOID, BillStatus.VOID),
])
def test_draft_transitions(kind, action, expected):
    assert next_status(kind, "draft", action) == expected


def test_open_action_is_only_allowed_from_draft():
    with pytest.raises(InvalidStateError):
        next_status(INV, InvoiceStatus.ISSUED, Action.ISSUE)
    with pytest.raises(InvalidStateError):
        next_status(BILL, BillStatus.PARTIALLY_PAID, Action.APPROVE)


def test_bill_cannot_be_issued():
    with pytest.raises(InvalidStateError):
        next_status(BILL, BillStatus.DRAFT, Action.ISSUE)


def test_payment_decides_between_partial_and_paid():
    assert next_status(INV, InvoiceStatus.ISSUED, Action.PAY,
                       balance=10000, total=25000) == InvoiceStatus.PARTIALLY_PAID
    assert next_status(INV, InvoiceStatus.PARTIALLY_PAID, Action.PAY,
                       balance=0, total=25000) == InvoiceStatus.PAID
    assert next_status(BILL, BillStatus.APPROVED, Action.PAY,
                       balance=0, total=50000) == BillStatus.PAID


@pytest.mark.parametrize("status", ["draft", "paid"])
def test_payment_needs_a_live_unpaid_document(status):
    with pytest.raises(InvalidStateError):
        next_status(INV, status, Action.PAY, balance=0, total=100)


def test_void_is_blocked_once_anything_is_paid():
    with pytest.raises(InvalidStateError):
        next_status(INV, InvoiceStatus.PARTIALLY_PAID, Action.VOID,
                    balance=5000, total=25000)
    assert next_status(INV, InvoiceStatus.ISSUED, Action.VOID,
                       balance=25000, total=25000) == InvoiceStatus.VOID


def test_void_document_rejects_everything():
    with pytest.raises(AlreadyVoidError):
        next_status(INV, InvoiceStatus.VOID, Action.VOID)
    for action in (Action.ISSUE, Action.PAY):
        with pytest.raises(InvalidStateError):
            next_status(INV, InvoiceStatus.VOID, action)
