from .accounts import (AccountRole, ensure_system_accounts, resolve_line_account,
                       resolve_required, seed_chart_of_accounts)
from .catalog import (create_customer, create_item, create_tax_rate,
                      create_vendor, update_customer, update_item,
                      update_tax_rate, update_vendor)
from .documents import (approve_bill, create_bill, create_document,
                        create_invoice, get_document, issue_invoice,
                        list_documents, transition, void_bill, void_document,
                        void_invoice)
from .lifecycle import Action, DocumentKind, next_status
from .mutation import ledger_mutation, load_company
from .payments import apply_payment, record_bill_payment, record_invoice_payment
from .posting import PostingLine, post, post_manual_entry
from .reporting import (account_balance, account_balances, aging_report,
                        ensure_ledger_balanced, list_journal_entries,
                        trial_balance)
from .sales_orders import (confirm_sales_order, convert_to_invoice,
                           create_sales_order, update_sales_order)
from .sequences import allocate, peek
from .valuation import summarize, valuate
