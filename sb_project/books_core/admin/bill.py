from django.contrib import admin

from ..models import Bill, Vendor
from .actions import approve_bills, void_documents
from .inlines import BillLineInline, BillPaymentInline
from .invoice import DOCUMENT_READONLY


# Register `Bill` model
@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ("id", "company", "number", "vendor", "vendor_reference",
                    "issue_date", "due_date", "status", "total", "balance")
    list_filter = ("company", "status", "issue_date")
    search_fields = ("number", "vendor__name", "vendor_reference")
    actions = [approve_bills, void_documents]
    inlines = [BillLineInline, BillPaymentInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("company", "vendor")

    def get_readonly_fields(self, request, obj=None):
        if obj and obj.status != "draft":
            return [f.name for f in self.model._meta.fields]
        return DOCUMENT_READONLY + ("approved_at",)

    def has_delete_permission(self, request, obj=None):
        if obj and obj.status != "draft":
            return False
        return super().has_delete_permission(request, obj)


# Register `Vendor` model
@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("id", "company", "name", "email", "payment_terms_days",
                    "is_archived")
    search_fields = ("name", "email", "vat_number")
    list_filter = ("company", "is_archived")
