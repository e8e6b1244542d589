import logging

from ..exceptions import PaymentExceedsBalanceError, ValidationError
from ..models import (BillPayment, InvoicePayment, JournalSource, Payment,
                      PaymentDirection, PaymentMethod)
from .accounts import ensure_system_accounts
from .audit_helper import log_action
from .documents import DOCUMENT_MODELS, document_kind, get_scoped, lock_document
from .inputs import to_amount, to_date, today
from .lifecycle import Action, DocumentKind, next_status, payable_statuses
from .mutation import ledger_mutation
from .posting import payment_lines, post

logger = logging.getLogger(__name__)

# kind: (direction, application model, posting source)
PAYMENT_SETUP = {
    DocumentKind.INVOICE: (PaymentDirection.AR, InvoicePayment,
                           JournalSource.INVOICE_PAYMENT),
    DocumentKind.BILL: (PaymentDirection.AP, BillPayment,
                        JournalSource.BILL_PAYMENT),
}


def _applications(document_id, payload, amount):
    """Normalise to [(document_id, amount)]; sums must match the payment."""
    if document_id is not None:
        return [(document_id, amount)]
    raw = payload.get("applications") or []
    if not isinstance(raw, list):
        raise ValidationError("Applications must be a list", field="applications")
    apps = []
    for i, app in enumerate(raw):
        if not isinstance(app, dict):
            raise ValidationError("Application must be an object",
                                  field=f"applications.{i}")
        try:
            doc_id = int(app.get("document"))
        except (TypeError, ValueError):
            raise ValidationError("Application needs a document id",
                                  field=f"applications.{i}.document")
        apps.append((doc_id, to_amount(app.get("amount"),
                                       f"applications.{i}.amount")))
    if apps:
        if len({doc_id for doc_id, _ in apps}) != len(apps):
            raise ValidationError("A document can only be applied once per payment",
                                  field="applications")
        if sum(a for _, a in apps) != amount:
            raise ValidationError(
                "Applied amounts must add up to the payment amount",
                field="applications")
    return apps


def _settle(company, kind, doc_id, amount, payment, app_model):
    """Apply part of a payment to one locked document."""
    doc = lock_document(company, kind, doc_id)
    if doc.status in payable_statuses(kind) and amount > doc.balance:
        raise PaymentExceedsBalanceError(
            f"Payment of {amount} exceeds outstanding balance {doc.balance} "
            f"on {kind} {doc.number}"
        )
    new_status = next_status(kind, doc.status, Action.PAY,
                             balance=doc.balance - amount, total=doc.total)
    app_model.objects.create(payment=payment, amount=amount,
                             **{kind.value: doc})
    doc.balance -= amount
    doc.status = new_status
    doc.save()
    logger.info("Applied %s to %s %s; balance %s, status %s",
                amount, kind, doc.pk, doc.balance, doc.status)
    return doc


def apply_payment(company_id, kind, document_id=None, payload=None, user=None):
    """
    Record a customer receipt (kind=invoice) or vendor payment (kind=bill).

    With a document_id the whole amount settles that document. Without one
    the payload may carry "applications": [{"document", "amount"}] spread
    across several documents of the same counterparty; the payment is then
    posted once (Dr Bank / Cr AR, or Dr AP / Cr Bank). A payment with no
    applications is a standalone record and posts nothing.
    """
    kind = document_kind(kind)
    payload = payload or {}
    direction, app_model, source = PAYMENT_SETUP[kind]
    party_field = DOCUMENT_MODELS[kind][3]

    with ledger_mutation(company_id) as company:
        amount = to_amount(payload.get("amount"), "amount")
        method = payload.get("method") or PaymentMethod.OTHER
        if method not in PaymentMethod.values:
            raise ValidationError(f"Unknown payment method {method!r}",
                                  field="method")
        apps = _applications(document_id, payload, amount)

        party = None
        if payload.get(party_field) not in (None, ""):
            party = get_scoped(DOCUMENT_MODELS[kind][2], company,
                               payload[party_field], party_field)

        payment = Payment.objects.create(
            company=company,
            direction=direction,
            method=method,
            amount=amount,
            date=to_date(payload.get("date"), "date", default=today()),
            reference=payload.get("reference"),
            **{party_field: party},
        )

        if apps:
            ensure_system_accounts(company)
            docs = [_settle(company, kind, doc_id, doc_amount, payment, app_model)
                    for doc_id, doc_amount in apps]

            party_ids = {getattr(d, f"{party_field}_id") for d in docs}
            if party is not None:
                party_ids.add(party.pk)
            if len(party_ids) != 1:
                raise ValidationError(
                    f"All documents on one payment must share the same {party_field}",
                    field="applications")
            if party is None:
                setattr(payment, party_field, getattr(docs[0], party_field))

            numbers = ", ".join(d.number for d in docs)
            payment.journal_entry = post(
                company,
                date=payment.date,
                memo=f"Payment for {kind} {numbers}",
                source=source,
                source_id=payment.pk,
                lines=payment_lines(company, direction, amount),
                user=user,
            )
            payment.save()

        log_action(action="pay", instance=payment, user=user, changes={
            "amount": amount,
            "applications": [[doc_id, a] for doc_id, a in apps],
        })
        logger.info("Recorded %s payment %s of %s for company %s",
                    direction, payment.pk, amount, company.pk)
        return payment


def record_invoice_payment(company_id, invoice_id, payload, user=None):
    return apply_payment(company_id, DocumentKind.INVOICE, invoice_id, payload, user)


def record_bill_payment(company_id, bill_id, payload, user=None):
    return apply_payment(company_id, DocumentKind.BILL, bill_id, payload, user)
