from .account import (AccountAdmin, AccountBalanceSnapshotAdmin, CompanyAdmin,
                      CurrencyAdmin, DocumentSequenceAdmin, TaxRateAdmin)
from .actions import approve_bills, issue_invoices, void_documents
from .auditlog import AuditLogAdmin
from .bill import BillAdmin, VendorAdmin
from .inlines import (BillLineInline, BillPaymentInline, InvoiceLineInline,
                      InvoicePaymentInline, JournalLineInline,
                      SalesOrderLineInline)
from .invoice import CustomerAdmin, InvoiceAdmin, PaymentAdmin, SalesOrderAdmin
from .item import ItemAdmin
from .journal import JournalEntryAdmin
