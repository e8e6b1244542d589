from .account import DEBIT_NORMAL_TYPES, Account, AccountType
from .auditlog import AuditLog
from .bill import Bill, BillLine, BillStatus
from .company import Company
from .currency import Currency
from .customer import Customer
from .invoice import Invoice, InvoiceLine, InvoiceStatus
from .item import Item
from .journal import JournalEntry, JournalLine, JournalSource
from .payment import (BillPayment, InvoicePayment, Payment, PaymentDirection,
                      PaymentMethod)
from .sales_order import SalesOrder, SalesOrderLine, SalesOrderStatus
from .sequence import DocumentSequence, SequenceKind
from .snapshot import AccountBalanceSnapshot
from .tax_rate import TaxRate
from .vendor import Vendor
