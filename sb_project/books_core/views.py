import json
import logging
from decimal import Decimal
from functools import wraps

from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from . import services
from .exceptions import (AccountNotConfiguredError, AlreadyVoidError,
                         BooksError, InvalidStateError, NotFoundError,
                         PaymentExceedsBalanceError, UnbalancedEntryError,
                         ValidationError)
from .models import Company
from .services.inputs import optional_date, to_date, today

logger = logging.getLogger(__name__)

# Stable HTTP status per error kind
HTTP_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    InvalidStateError: 409,
    AlreadyVoidError: 409,
    PaymentExceedsBalanceError: 422,
    AccountNotConfiguredError: 500,
    UnbalancedEntryError: 500,
}

KINDS = {"invoices": "invoice", "bills": "bill"}


def books_api(view):
    """Parse the JSON body, resolve the company and map errors to responses."""

    @csrf_exempt
    @wraps(view)
    def wrapper(request, slug, *args, **kwargs):
        company = get_object_or_404(Company, slug=slug)
        if request.method == "POST":
            try:
                # Decimal keeps 1.5 and 12.5 exact for quantities and rates
                request.payload = json.loads(request.body or b"{}",
                                             parse_float=Decimal)
            except ValueError:
                return JsonResponse(
                    {"error": {"code": "validation_error",
                               "message": "Body must be JSON"}}, status=400)
            if not isinstance(request.payload, dict):
                return JsonResponse(
                    {"error": {"code": "validation_error",
                               "message": "Body must be a JSON object"}},
                    status=400)
        else:
            request.payload = {}
        try:
            return view(request, company, *args, **kwargs)
        except BooksError as exc:
            status = HTTP_STATUS.get(type(exc), 400)
            if status >= 500:
                logger.error("%s on %s: %s", exc.code, request.path, exc.message)
            return JsonResponse({"error": exc.as_dict()}, status=status)

    return wrapper


def _user(request):
    user = getattr(request, "user", None)
    return user if user is not None and user.is_authenticated else None


def _kind(kind_slug):
    if kind_slug not in KINDS:
        raise NotFoundError(f"Unknown document type {kind_slug}")
    return KINDS[kind_slug]


# ---------- serializers ----------
def line_to_dict(line):
    return {
        "position": line.position,
        "item": line.item_id,
        "description": line.description,
        "quantity": line.quantity,
        "unit_price": line.unit_price,
        "discount": line.discount,
        "tax_rate_percent": line.tax_rate_percent,
        "account": line.account.code,
        "net_amount": line.net_amount,
        "tax_amount": line.tax_amount,
        "total": line.line_total,
    }


def document_to_dict(doc):
    party = "customer" if hasattr(doc, "customer_id") else "vendor"
    return {
        "id": doc.pk,
        "number": doc.number,
        party: getattr(doc, f"{party}_id"),
        "status": doc.status,
        "issue_date": doc.issue_date,
        "due_date": doc.due_date,
        "currency": doc.currency_id,
        "subtotal": doc.subtotal,
        "tax_total": doc.tax_total,
        "total": doc.total,
        "balance": doc.balance,
        "lines": [line_to_dict(line) for line in doc.lines.all()],
        "payments": [
            {"payment": app.payment_id, "amount": app.amount}
            for app in doc.payment_applications.all()
        ],
    }


def payment_to_dict(payment):
    return {
        "id": payment.pk,
        "direction": payment.direction,
        "method": payment.method,
        "amount": payment.amount,
        "date": payment.date,
        "reference": payment.reference,
        "journal_entry": payment.journal_entry_id,
    }


def entry_to_dict(entry):
    return {
        "id": entry.pk,
        "date": entry.date,
        "memo": entry.memo,
        "source": entry.source,
        "source_id": entry.source_id,
        "reverses": entry.reverses_id,
        "lines": [
            {"account": line.account.code, "debit": line.debit,
             "credit": line.credit}
            for line in entry.lines.all()
        ],
    }


# ---------- documents ----------
@books_api
@require_http_methods(["GET", "POST"])
def documents_view(request, company, kind_slug):
    kind = _kind(kind_slug)
    if request.method == "POST":
        doc = services.create_document(company.pk, kind, request.payload,
                                       user=_user(request))
        return JsonResponse({"data": document_to_dict(doc)}, status=201)
    docs = services.list_documents(company.pk, kind,
                                   status=request.GET.get("status"))
    return JsonResponse({"data": [document_to_dict(d) for d in docs]})


@books_api
@require_GET
def document_detail_view(request, company, kind_slug, pk):
    doc = services.get_document(company.pk, _kind(kind_slug), pk)
    return JsonResponse({"data": document_to_dict(doc)})


@books_api
@require_http_methods(["POST"])
def document_transition_view(request, company, kind_slug, pk, action):
    doc = services.transition(company.pk, _kind(kind_slug), pk, action,
                              request.payload, user=_user(request))
    return JsonResponse({"data": document_to_dict(doc)})


# ---------- payments ----------
@books_api
@require_http_methods(["POST"])
def payments_view(request, company):
    """{"kind": "invoice"|"bill", "amount", "applications": [...], ...}"""
    payload = request.payload
    payment = services.apply_payment(
        company.pk, payload.get("kind", "invoice"), None, payload,
        user=_user(request))
    return JsonResponse({"data": payment_to_dict(payment)}, status=201)


# ---------- journal ----------
@books_api
@require_http_methods(["GET", "POST"])
def journal_view(request, company):
    if request.method == "POST":
        entry = services.post_manual_entry(company.pk, request.payload,
                                           user=_user(request))
        return JsonResponse({"data": entry_to_dict(entry)}, status=201)
    entries = services.list_journal_entries(
        company,
        date_from=optional_date(request.GET.get("from"), "from"),
        date_to=optional_date(request.GET.get("to"), "to"),
    )
    return JsonResponse({"data": [entry_to_dict(e) for e in entries]})


# ---------- reports ----------
@books_api
@require_GET
def trial_balance_view(request, company):
    as_of = to_date(request.GET.get("as_of"), "as_of", default=today())
    return JsonResponse({"data": services.trial_balance(company, as_of)})


@books_api
@require_GET
def aging_view(request, company, kind_slug):
    as_of = to_date(request.GET.get("as_of"), "as_of", default=today())
    report = services.aging_report(company, _kind(kind_slug), as_of)
    return JsonResponse({"data": report})


# ---------- master data ----------
CATALOG_CREATE = {
    "customers": services.create_customer,
    "vendors": services.create_vendor,
    "items": services.create_item,
    "tax-rates": services.create_tax_rate,
}


@books_api
@require_http_methods(["POST"])
def catalog_create_view(request, company, resource):
    if resource not in CATALOG_CREATE:
        raise NotFoundError(f"Unknown resource {resource}")
    obj = CATALOG_CREATE[resource](company.pk, request.payload,
                                   user=_user(request))
    return JsonResponse({"data": {"id": obj.pk, "name": obj.name}}, status=201)


# ---------- sales orders ----------
@books_api
@require_http_methods(["POST"])
def sales_orders_view(request, company):
    order = services.create_sales_order(company.pk, request.payload,
                                        user=_user(request))
    return JsonResponse({"data": {"id": order.pk, "number": order.number,
                                  "status": order.status,
                                  "total": order.total}}, status=201)


@books_api
@require_http_methods(["POST"])
def sales_order_action_view(request, company, pk, action):
    user = _user(request)
    if action == "confirm":
        order = services.confirm_sales_order(company.pk, pk, user=user)
        return JsonResponse({"data": {"id": order.pk, "status": order.status}})
    if action == "invoice":
        invoice = services.convert_to_invoice(company.pk, pk, user=user)
        return JsonResponse({"data": document_to_dict(invoice)}, status=201)
    raise InvalidStateError(f"Unknown sales order action {action}")
