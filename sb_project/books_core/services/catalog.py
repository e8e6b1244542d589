"""
Master data: customers, vendors, items and tax rates.

Writes go through ledger_mutation like everything else so an item or rate
never changes halfway through a document being valued.
"""
import logging
from decimal import Decimal, InvalidOperation

from ..exceptions import ValidationError
from ..models import Customer, Item, TaxRate, Vendor
from .accounts import get_account
from .audit_helper import log_action
from .documents import get_scoped
from .inputs import to_amount
from .mutation import ledger_mutation

logger = logging.getLogger(__name__)

PARTY_FIELDS = ("name", "email", "phone", "vat_number", "notes",
                "payment_terms_days", "is_archived")
ITEM_FIELDS = ("sku", "name", "description", "unit_price", "is_service",
               "is_active")


def _copy(instance, payload, fields):
    changed = {}
    for field in fields:
        if field in payload:
            setattr(instance, field, payload[field])
            changed[field] = payload[field]
    return changed


def _save(company, instance, payload, fields, action, user):
    changed = _copy(instance, payload, fields)
    instance.save()
    log_action(action=action, instance=instance, user=user, company=company,
               changes={k: str(v) for k, v in changed.items()})
    logger.info("%s %s %s for company %s", action.capitalize(),
                instance.__class__.__name__, instance.pk, company.pk)
    return instance


# ---------- Customers / Vendors ----------
def create_customer(company_id, payload, user=None):
    with ledger_mutation(company_id) as company:
        return _save(company, Customer(company=company), payload,
                     PARTY_FIELDS, "create", user)


def update_customer(company_id, customer_id, payload, user=None):
    with ledger_mutation(company_id) as company:
        customer = get_scoped(Customer, company, customer_id, "customer")
        return _save(company, customer, payload, PARTY_FIELDS, "update", user)


def create_vendor(company_id, payload, user=None):
    with ledger_mutation(company_id) as company:
        return _save(company, Vendor(company=company), payload,
                     PARTY_FIELDS, "create", user)


def update_vendor(company_id, vendor_id, payload, user=None):
    with ledger_mutation(company_id) as company:
        vendor = get_scoped(Vendor, company, vendor_id, "vendor")
        return _save(company, vendor, payload, PARTY_FIELDS, "update", user)


# ---------- Items ----------
def _item_links(company, item, payload):
    if "unit_price" in payload:
        to_amount(payload["unit_price"], "unit_price", allow_zero=True)
    # Accounts by code or id; tax rate by id. Explicit None clears a link.
    for field in ("sales_account", "purchase_account"):
        if field in payload:
            ref = payload[field]
            setattr(item, field,
                    None if ref in (None, "") else get_account(company, ref, field=field))
    if "tax_rate" in payload:
        ref = payload["tax_rate"]
        item.tax_rate = None if ref in (None, "") else get_scoped(
            TaxRate, company, ref, "tax_rate", active_only=True)


def create_item(company_id, payload, user=None):
    with ledger_mutation(company_id) as company:
        item = Item(company=company)
        _item_links(company, item, payload)
        return _save(company, item, payload, ITEM_FIELDS, "create", user)


def update_item(company_id, item_id, payload, user=None):
    with ledger_mutation(company_id) as company:
        item = get_scoped(Item, company, item_id, "item")
        _item_links(company, item, payload)
        return _save(company, item, payload, ITEM_FIELDS, "update", user)


# ---------- Tax rates ----------
def _percent(payload):
    if "rate_percent" not in payload:
        return {}
    value = payload["rate_percent"]
    if isinstance(value, (bool, float)):
        raise ValidationError("rate_percent must be a decimal string or integer",
                              field="rate_percent")
    try:
        return {"rate_percent": Decimal(str(value))}
    except InvalidOperation:
        raise ValidationError("rate_percent is not a number",
                              field="rate_percent")


def create_tax_rate(company_id, payload, user=None):
    with ledger_mutation(company_id) as company:
        data = {**payload, **_percent(payload)}
        return _save(company, TaxRate(company=company), data,
                     ("name", "rate_percent", "is_active"), "create", user)


def update_tax_rate(company_id, tax_rate_id, payload, user=None):
    """Existing lines keep the percent they snapshotted."""
    with ledger_mutation(company_id) as company:
        rate = get_scoped(TaxRate, company, tax_rate_id, "tax_rate")
        data = {**payload, **_percent(payload)}
        return _save(company, rate, data,
                     ("name", "rate_percent", "is_active"), "update", user)
