from django.contrib import admin

from ..models import Item


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("id", "company", "sku", "name", "unit_price",
                    "sales_account", "purchase_account", "tax_rate",
                    "is_active")
    list_filter = ("company", "is_service", "is_active")
    search_fields = ("sku", "name")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "sales_account",
                                 "purchase_account", "tax_rate")
