from django.contrib import admin

from ..models import (BillLine, BillPayment, InvoiceLine, InvoicePayment,
                      JournalLine, SalesOrderLine)

LINE_FIELDS = ("position", "description", "item", "quantity", "unit_price",
               "discount", "tax_rate_percent", "account", "net_amount",
               "tax_amount", "line_total")


class LineInline(admin.TabularInline):
    """Lines are valued by the services; admin shows them as they were saved."""
    extra = 0
    fields = LINE_FIELDS
    readonly_fields = LINE_FIELDS
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class InvoiceLineInline(LineInline):
    model = InvoiceLine


class BillLineInline(LineInline):
    model = BillLine


class SalesOrderLineInline(LineInline):
    model = SalesOrderLine


class InvoicePaymentInline(admin.TabularInline):
    model = InvoicePayment
    extra = 0
    readonly_fields = ("payment", "amount")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class BillPaymentInline(InvoicePaymentInline):
    model = BillPayment


class JournalLineInline(admin.TabularInline):
    model = JournalLine
    extra = 0
    fields = ("position", "account", "debit", "credit")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False
