from django.contrib import admin

from ..models import (Account, AccountBalanceSnapshot, Company, Currency,
                      DocumentSequence, TaxRate)
from .ReadOnly import ReadOnlyAdmin


@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "symbol", "decimal_places")


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "default_currency", "created_at")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}


# Register `Account` model
@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    # show key accounting fields
    list_display = ("id", "company", "code", "name", "ac_type",
                    "normal_balance", "is_system", "is_active")
    list_filter = ("company", "ac_type", "is_active")
    search_fields = ("code", "name")
    # accounts grouped by company, then sorted by code
    ordering = ("company", "code")
    # derived from ac_type on save
    readonly_fields = ("normal_balance",)


@admin.register(TaxRate)
class TaxRateAdmin(admin.ModelAdmin):
    list_display = ("id", "company", "name", "rate_percent", "is_active")
    list_filter = ("company", "is_active")


@admin.register(DocumentSequence)
class DocumentSequenceAdmin(ReadOnlyAdmin):
    list_display = ("company", "kind", "year", "next_value")
    list_filter = ("company", "kind", "year")


@admin.register(AccountBalanceSnapshot)
class AccountBalanceSnapshotAdmin(ReadOnlyAdmin):
    list_display = ("company", "snapshot_date", "account", "debit_total",
                    "credit_total", "balance")
    list_filter = ("company", "snapshot_date")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        return super().get_queryset(request).select_related("company", "account")
