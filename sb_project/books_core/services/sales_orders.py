import datetime
import logging

from ..exceptions import InvalidStateError, NotFoundError
from ..models import (Customer, Invoice, InvoiceLine, SalesOrder,
                      SalesOrderLine, SalesOrderStatus, SequenceKind)
from .accounts import AccountRole
from .audit_helper import log_action
from .documents import build_line_values, get_scoped, resolve_currency
from .inputs import require, to_date, today
from .mutation import ledger_mutation
from .sequences import allocate

logger = logging.getLogger(__name__)

# Line fields copied verbatim from an order line onto its invoice line
SNAPSHOT_FIELDS = (
    "position", "item", "description", "quantity", "unit_price", "discount",
    "tax_rate", "tax_rate_percent", "account", "net_amount", "tax_amount",
    "line_total",
)


def _lock_order(company, order_id):
    order = (SalesOrder.objects.select_for_update()
             .filter(company=company, pk=order_id).first())
    if order is None:
        raise NotFoundError(f"Sales order {order_id} not found")
    return order


def _fill(company, order, payload, customer):
    issue_date = to_date(payload.get("issue_date"), "issue_date",
                         default=order.issue_date or today())
    order.issue_date = issue_date
    order.due_date = to_date(
        payload.get("due_date"), "due_date",
        default=issue_date + datetime.timedelta(days=customer.payment_terms_days))
    order.currency = resolve_currency(company, payload.get("currency"))
    order.notes = payload.get("notes", order.notes)

    line_values, totals = build_line_values(
        company, AccountRole.SALES, payload.get("lines"))
    order.subtotal, order.tax_total, order.total = totals
    return line_values


def create_sales_order(company_id, payload, user=None):
    """Draft order. The SO number is taken right away."""
    with ledger_mutation(company_id) as company:
        customer = get_scoped(Customer, company, require(payload, "customer"),
                              "customer")
        order = SalesOrder(company=company, customer=customer)
        line_values = _fill(company, order, payload, customer)
        order.number = allocate(company, SequenceKind.SALES_ORDER,
                                order.issue_date)
        order.save()
        for values in line_values:
            SalesOrderLine.objects.create(sales_order=order, **values)
        log_action(action="create", instance=order, user=user,
                   changes={"number": order.number, "total": order.total})
        logger.info("Created sales order %s for company %s",
                    order.number, company.pk)
        return order


def update_sales_order(company_id, order_id, payload, user=None):
    """Replace dates, notes and lines of a draft order. Number and customer stay."""
    with ledger_mutation(company_id) as company:
        order = _lock_order(company, order_id)
        if order.status != SalesOrderStatus.DRAFT:
            raise InvalidStateError("Only draft sales orders can be updated")
        line_values = _fill(company, order, payload, order.customer)
        order.save()
        order.lines.all().delete()
        for values in line_values:
            SalesOrderLine.objects.create(sales_order=order, **values)
        log_action(action="update", instance=order, user=user,
                   changes={"total": order.total})
        return order


def confirm_sales_order(company_id, order_id, user=None):
    with ledger_mutation(company_id) as company:
        order = _lock_order(company, order_id)
        if order.status != SalesOrderStatus.DRAFT:
            raise InvalidStateError("Sales order is not in draft status")
        order.status = SalesOrderStatus.CONFIRMED
        order.save()
        log_action(action="confirm", instance=order, user=user)
        return order


def convert_to_invoice(company_id, order_id, user=None):
    """
    Turn a confirmed order into a draft invoice that copies the order
    lines' snapshots as they are (no re-pricing, no re-resolution).
    """
    with ledger_mutation(company_id) as company:
        order = _lock_order(company, order_id)
        if order.status == SalesOrderStatus.INVOICED:
            raise InvalidStateError("Sales order already invoiced")
        if order.status == SalesOrderStatus.DRAFT:
            raise InvalidStateError(
                "Sales order must be confirmed before invoicing")

        invoice = Invoice.objects.create(
            company=company,
            customer=order.customer,
            sales_order=order,
            issue_date=order.issue_date,
            due_date=order.due_date,
            currency=order.currency,
            subtotal=order.subtotal,
            tax_total=order.tax_total,
            total=order.total,
            balance=order.total,
            memo=order.notes,
        )
        for line in order.lines.all():
            InvoiceLine.objects.create(
                invoice=invoice,
                **{field: getattr(line, field) for field in SNAPSHOT_FIELDS},
            )

        order.status = SalesOrderStatus.INVOICED
        order.save()
        log_action(action="convert", instance=order, user=user,
                   changes={"invoice": invoice.pk})
        logger.info("Sales order %s converted to draft invoice %s",
                    order.number, invoice.pk)
        return invoice
