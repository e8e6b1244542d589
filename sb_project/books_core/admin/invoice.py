from django.contrib import admin

from ..models import Customer, Invoice, Payment, SalesOrder
from .actions import issue_invoices, void_documents
from .inlines import InvoiceLineInline, InvoicePaymentInline, SalesOrderLineInline
from .ReadOnly import ReadOnlyAdmin

# Header fields the services own; never edited by hand
DOCUMENT_READONLY = ("number", "status", "subtotal", "tax_total", "total",
                     "balance", "voided_at")


# Register `Invoice` model
@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("id", "company", "number", "customer", "issue_date",
                    "due_date", "status", "total", "balance")
    list_filter = ("company", "status", "issue_date")
    search_fields = ("number", "customer__name")
    actions = [issue_invoices, void_documents]
    inlines = [InvoiceLineInline, InvoicePaymentInline]

    # Use a SQL join so it fetches company & customer in the same query
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "customer")

    """ Enforce immutability at admin level """

    def get_readonly_fields(self, request, obj=None):
        # Once issued, every field becomes read-only
        if obj and obj.status != "draft":
            return [f.name for f in self.model._meta.fields]
        return DOCUMENT_READONLY + ("issued_at", "sales_order")

    def has_delete_permission(self, request, obj=None):
        if obj and obj.status != "draft":
            return False  # removes “Delete” option for live invoices
        return super().has_delete_permission(request, obj)


# Register `Customer` model
@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "company", "name", "email", "payment_terms_days",
                    "is_archived")
    search_fields = ("name", "email", "vat_number")
    list_filter = ("company", "is_archived")


@admin.register(SalesOrder)
class SalesOrderAdmin(admin.ModelAdmin):
    list_display = ("id", "company", "number", "customer", "status",
                    "issue_date", "total")
    list_filter = ("company", "status")
    readonly_fields = ("number", "status", "subtotal", "tax_total", "total")
    inlines = [SalesOrderLineInline]


@admin.register(Payment)
class PaymentAdmin(ReadOnlyAdmin):
    list_display = ("id", "company", "direction", "method", "amount", "date",
                    "customer", "vendor", "journal_entry")
    list_filter = ("company", "direction", "method")
    search_fields = ("reference",)
