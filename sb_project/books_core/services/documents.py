import datetime
from decimal import Decimal
import logging

from django.utils import timezone

from ..exceptions import InvalidStateError, NotFoundError, ValidationError
from ..models import (Bill, BillLine, Currency, Customer, Invoice, InvoiceLine,
                      Item, JournalEntry, JournalSource, SequenceKind, TaxRate,
                      Vendor)
from .accounts import AccountRole, ensure_system_accounts, resolve_line_account
from .audit_helper import log_action
from .inputs import require, to_date, today
from .lifecycle import Action, DocumentKind, next_status
from .mutation import ledger_mutation, load_company
from .posting import (bill_approve_lines, invoice_issue_lines, post,
                      reversal_lines)
from .sequences import allocate
from .valuation import summarize, valuate

logger = logging.getLogger(__name__)

# Per kind: header model, line model, counterparty model/field, line role
DOCUMENT_MODELS = {
    DocumentKind.INVOICE: (Invoice, InvoiceLine, Customer, "customer"),
    DocumentKind.BILL: (Bill, BillLine, Vendor, "vendor"),
}

LINE_ROLES = {
    DocumentKind.INVOICE: AccountRole.SALES,
    DocumentKind.BILL: AccountRole.OPERATING_EXPENSES,
}

POSTING_SOURCES = {
    # kind: (open source, void source)
    DocumentKind.INVOICE: (JournalSource.INVOICE_ISSUE, JournalSource.INVOICE_VOID),
    DocumentKind.BILL: (JournalSource.BILL_APPROVE, JournalSource.BILL_VOID),
}


def document_kind(kind):
    try:
        return DocumentKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown document kind {kind!r}", field="kind")


def get_scoped(model, company, pk, field, active_only=False):
    qs = model.objects.for_company(company)
    if active_only:
        qs = qs.filter(is_active=True)
    try:
        obj = qs.filter(pk=int(pk)).first()
    except (TypeError, ValueError):
        obj = None
    if obj is None:
        raise NotFoundError(f"{model.__name__} {pk} not found", field=field)
    return obj


# ----------------------------
# Line assembly
# ----------------------------
def build_line_values(company, role, raw_lines):
    """
    Turn raw line payloads into field dicts with every snapshot resolved:
    description and price fall back to the item, the tax percent is copied
    from an explicit value, a named rate or the item's rate (else 0) and
    the account goes through the resolver.
    """
    if not raw_lines:
        raise ValidationError("At least one line is required", field="lines")
    if not isinstance(raw_lines, list):
        raise ValidationError("Lines must be a list", field="lines")

    values, valuations = [], []
    for i, raw in enumerate(raw_lines):
        prefix = f"lines.{i}."
        if not isinstance(raw, dict):
            raise ValidationError("Line must be an object", field=f"lines.{i}")
        item = None
        if raw.get("item") not in (None, ""):
            item = get_scoped(Item, company, raw["item"], prefix + "item",
                              active_only=True)

        unit_price = raw.get("unit_price")
        if unit_price is None:
            if item is None:
                raise ValidationError("Line requires unit_price",
                                      field=prefix + "unit_price")
            unit_price = item.unit_price

        tax_rate = None
        if raw.get("tax_rate_percent") is not None:
            percent = raw["tax_rate_percent"]
        elif raw.get("tax_rate") not in (None, ""):
            tax_rate = get_scoped(TaxRate, company, raw["tax_rate"],
                                  prefix + "tax_rate", active_only=True)
            percent = tax_rate.rate_percent
        elif item is not None and item.tax_rate_id:
            tax_rate = item.tax_rate
            percent = tax_rate.rate_percent
        else:
            percent = None

        quantity = raw.get("quantity", 1)
        discount = raw.get("discount") or 0
        valuation = valuate(quantity, unit_price, discount,
                            percent, field_prefix=prefix)
        values.append({
            "position": i,
            "item": item,
            "description": raw.get("description") or (
                item.name if item else "Custom line"),
            "quantity": Decimal(str(quantity)),
            "unit_price": unit_price,
            "discount": discount,
            "tax_rate": tax_rate,
            "tax_rate_percent": percent if percent is not None else 0,
            "account": resolve_line_account(
                company, role, override=raw.get("account"), item=item),
            "net_amount": valuation.net_amount,
            "tax_amount": valuation.tax_amount,
            "line_total": valuation.total,
        })
        valuations.append(valuation)
    return values, summarize(valuations)


def resolve_currency(company, code):
    if code in (None, ""):
        return company.default_currency
    currency = Currency.objects.filter(code=code).first()
    if currency is None:
        raise NotFoundError(f"Currency {code} not found", field="currency")
    return currency


# ----------------------------
# Creation
# ----------------------------
def _create(company, kind, payload, user=None):
    model, line_model, party_model, party_field = DOCUMENT_MODELS[kind]
    party = get_scoped(party_model, company, require(payload, party_field),
                    party_field)

    issue_date = to_date(payload.get("issue_date"), "issue_date",
                         default=today())
    due_date = to_date(
        payload.get("due_date"), "due_date",
        default=issue_date + datetime.timedelta(days=party.payment_terms_days))

    line_values, totals = build_line_values(
        company, LINE_ROLES[kind], payload.get("lines"))

    extra = {}
    if kind == DocumentKind.BILL:
        extra["vendor_reference"] = payload.get("vendor_reference")

    doc = model.objects.create(
        company=company,
        issue_date=issue_date,
        due_date=due_date,
        currency=resolve_currency(company, payload.get("currency")),
        subtotal=totals.subtotal,
        tax_total=totals.tax_total,
        total=totals.total,
        balance=totals.total,  # nothing applied yet
        memo=payload.get("memo"),
        **{party_field: party},
        **extra,
    )
    for values in line_values:
        line_model.objects.create(**{kind.value: doc}, **values)

    log_action(action="create", instance=doc, user=user,
               changes={"total": doc.total, "lines": len(line_values)})
    logger.info("Created draft %s %s for company %s (total %s)",
                kind, doc.pk, company.pk, doc.total)
    return doc


def create_document(company_id, kind, payload, user=None):
    """Create a draft invoice or bill. Drafts have no number and no posting."""
    kind = document_kind(kind)
    with ledger_mutation(company_id) as company:
        return _create(company, kind, payload, user=user)


def create_invoice(company_id, payload, user=None):
    return create_document(company_id, DocumentKind.INVOICE, payload, user)


def create_bill(company_id, payload, user=None):
    return create_document(company_id, DocumentKind.BILL, payload, user)


# ----------------------------
# Transitions
# ----------------------------
def lock_document(company, kind, document_id):
    """Fetch a document FOR UPDATE, scoped to the company."""
    model = DOCUMENT_MODELS[kind][0]
    doc = (model.objects.select_for_update()
           .filter(company=company, pk=document_id).first())
    if doc is None:
        raise NotFoundError(f"{kind.label} {document_id} not found")
    return doc


def _open_document(company_id, kind, document_id, user=None):
    """
    draft → issued (invoice) / draft → approved (bill), with its posting.

    A document whose total is zero (e.g. a fully discounted line) is refused
    with ValidationError: it would post an entry with no lines.
    """
    action = Action.ISSUE if kind == DocumentKind.INVOICE else Action.APPROVE
    with ledger_mutation(company_id) as company:
        doc = lock_document(company, kind, document_id)
        new_status = next_status(kind, doc.status, action)
        if not doc.lines.exists():
            raise ValidationError(f"{kind.label} has no lines", field="lines")
        if doc.total <= 0:
            raise ValidationError(f"Cannot {action} a {kind} with a zero total")
        ensure_system_accounts(company)

        seq_kind = SequenceKind.INVOICE if kind == DocumentKind.INVOICE else SequenceKind.BILL
        doc.number = allocate(company, seq_kind, doc.issue_date)
        doc.status = new_status
        if kind == DocumentKind.INVOICE:
            doc.issued_at = timezone.now()
            lines = invoice_issue_lines(company, doc)
            memo = f"Issue invoice {doc.number}"
        else:
            doc.approved_at = timezone.now()
            lines = bill_approve_lines(company, doc)
            memo = f"Approve bill {doc.number}"
        doc.save()

        post(company, date=doc.issue_date, memo=memo,
             source=POSTING_SOURCES[kind][0], source_id=doc.pk,
             lines=lines, user=user)
        log_action(action=action.value, instance=doc, user=user,
                   changes={"number": doc.number, "status": doc.status})
        logger.info("%s %s → %s as %s", kind.label, doc.pk, doc.status, doc.number)
        return doc


def issue_invoice(company_id, invoice_id, user=None):
    return _open_document(company_id, DocumentKind.INVOICE, invoice_id, user)


def approve_bill(company_id, bill_id, user=None):
    return _open_document(company_id, DocumentKind.BILL, bill_id, user)


def void_document(company_id, kind, document_id, payload=None, user=None):
    """
    Void a document that has no payments.

    A draft is simply marked void. A live document gets a reversing entry
    that mirrors its issue/approve posting, dated payload["date"] or today.
    """
    kind = document_kind(kind)
    payload = payload or {}
    with ledger_mutation(company_id) as company:
        doc = lock_document(company, kind, document_id)
        new_status = next_status(kind, doc.status, Action.VOID,
                                 balance=doc.balance, total=doc.total)
        if doc.payment_applications.exists():
            raise InvalidStateError(
                f"{kind.label} has payments applied and cannot be voided")

        if doc.status != "draft":
            open_source, void_source = POSTING_SOURCES[kind]
            original = (JournalEntry.objects
                        .filter(company=company, source=open_source,
                                source_id=doc.pk, reverses__isnull=True)
                        .order_by("id").first())
            if original is None:
                raise InvalidStateError(
                    f"{kind.label} {doc.number} has no posting to reverse")
            post(company,
                 date=to_date(payload.get("date"), "date", default=today()),
                 memo=f"Void {kind} {doc.number}",
                 source=void_source, source_id=doc.pk,
                 lines=reversal_lines(original), reverses=original, user=user)

        previous = doc.status
        doc.status = new_status
        doc.balance = 0
        doc.voided_at = timezone.now()
        doc.save()
        log_action(action="void", instance=doc, user=user,
                   changes={"from": previous})
        logger.info("%s %s voided (was %s)", kind.label, doc.pk, previous)
        return doc


def void_invoice(company_id, invoice_id, payload=None, user=None):
    return void_document(company_id, DocumentKind.INVOICE, invoice_id, payload, user)


def void_bill(company_id, bill_id, payload=None, user=None):
    return void_document(company_id, DocumentKind.BILL, bill_id, payload, user)


def transition(company_id, kind, document_id, action, payload=None, user=None):
    """
    Single entry point for lifecycle actions: issue, approve, pay, void.
    Returns the document in its new state.
    """
    kind = document_kind(kind)
    try:
        action = Action(action)
    except ValueError:
        raise InvalidStateError(f"Unknown action {action!r}")

    if action in (Action.ISSUE, Action.APPROVE):
        expected = Action.ISSUE if kind == DocumentKind.INVOICE else Action.APPROVE
        if action != expected:
            raise InvalidStateError(f"A {kind} cannot be {action}d")
        return _open_document(company_id, kind, document_id, user)
    if action == Action.VOID:
        return void_document(company_id, kind, document_id, payload, user)

    # lazy import to avoid circular import at module load time
    from .payments import apply_payment

    apply_payment(company_id, kind, document_id, payload or {}, user=user)
    return get_document(company_id, kind, document_id)


# ----------------------------
# Reads
# ----------------------------
def get_document(company_id, kind, document_id):
    kind = document_kind(kind)
    company = load_company(company_id)
    model = DOCUMENT_MODELS[kind][0]
    doc = (model.objects.for_company(company)
           .prefetch_related("lines__account", "payment_applications")
           .filter(pk=document_id).first())
    if doc is None:
        raise NotFoundError(f"{kind.label} {document_id} not found")
    return doc


def list_documents(company_id, kind, status=None):
    kind = document_kind(kind)
    company = load_company(company_id)
    qs = DOCUMENT_MODELS[kind][0].objects.for_company(company)
    if status:
        qs = qs.filter(status=status)
    return list(qs.select_related(DOCUMENT_MODELS[kind][3]))
