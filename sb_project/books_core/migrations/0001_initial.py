from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

INVOICE_STATUS = [
    ("draft", "Draft"),
    ("issued", "Issued"),
    ("partially_paid", "Partially paid"),
    ("paid", "Paid"),
    ("void", "Void"),
]

BILL_STATUS = [
    ("draft", "Draft"),
    ("approved", "Approved"),
    ("partially_paid", "Partially paid"),
    ("paid", "Paid"),
    ("void", "Void"),
]


def document_fields(name):
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                   serialize=False, verbose_name="ID")),
        ("number", models.CharField(blank=True, max_length=32, null=True)),
        ("issue_date", models.DateField()),
        ("due_date", models.DateField()),
        ("subtotal", models.BigIntegerField(default=0)),
        ("tax_total", models.BigIntegerField(default=0)),
        ("total", models.BigIntegerField(default=0)),
        ("balance", models.BigIntegerField(default=0)),
        ("memo", models.TextField(blank=True, null=True)),
        ("voided_at", models.DateTimeField(blank=True, null=True)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("company", models.ForeignKey(
            on_delete=django.db.models.deletion.CASCADE,
            related_name=f"{name}s", to="books_core.company")),
        ("currency", models.ForeignKey(
            on_delete=django.db.models.deletion.PROTECT,
            related_name="+", to="books_core.currency")),
    ]


def document_constraints(name):
    return [
        models.UniqueConstraint(fields=("company", "number"),
                                name=f"uq_{name}_company_number"),
        models.CheckConstraint(
            condition=models.Q(("balance__gte", 0),
                               ("balance__lte", models.F("total"))),
            name=f"{name}_balance_within_total"),
    ]


def line_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                   serialize=False, verbose_name="ID")),
        ("position", models.PositiveIntegerField(default=0)),
        ("description", models.CharField(default="Custom line", max_length=400)),
        ("quantity", models.DecimalField(decimal_places=4, default=Decimal("1"),
                                         max_digits=14)),
        ("unit_price", models.BigIntegerField()),
        ("discount", models.BigIntegerField(default=0)),
        ("tax_rate_percent", models.DecimalField(
            decimal_places=2, default=Decimal("0.00"), max_digits=5)),
        ("net_amount", models.BigIntegerField(default=0)),
        ("tax_amount", models.BigIntegerField(default=0)),
        ("line_total", models.BigIntegerField(default=0)),
        ("account", models.ForeignKey(
            on_delete=django.db.models.deletion.PROTECT,
            related_name="+", to="books_core.account")),
        ("item", models.ForeignKey(
            blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
            related_name="+", to="books_core.item")),
        ("tax_rate", models.ForeignKey(
            blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
            related_name="+", to="books_core.taxrate")),
    ]


def line_constraint(name):
    return models.CheckConstraint(
        condition=models.Q(("quantity__gt", 0), ("discount__gte", 0),
                           ("net_amount__gte", 0)),
        name=f"{name}_valid_amounts")


def counterparty_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                   serialize=False, verbose_name="ID")),
        ("name", models.CharField(max_length=200)),
        ("email", models.EmailField(blank=True, max_length=254, null=True)),
        ("phone", models.CharField(blank=True, max_length=40, null=True)),
        ("vat_number", models.CharField(blank=True, max_length=40, null=True)),
        ("notes", models.TextField(blank=True, null=True)),
        ("payment_terms_days", models.PositiveIntegerField(default=0)),
        ("is_archived", models.BooleanField(default=False)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Currency",
            fields=[
                ("code", models.CharField(max_length=3, primary_key=True,
                                          serialize=False)),
                ("name", models.CharField(max_length=64)),
                ("symbol", models.CharField(blank=True, max_length=8, null=True)),
                ("decimal_places", models.PositiveSmallIntegerField(default=2)),
            ],
            options={"verbose_name_plural": "currencies"},
        ),
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("default_currency", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="companies", to="books_core.currency")),
            ],
            options={"verbose_name_plural": "companies"},
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=32)),
                ("name", models.CharField(max_length=200)),
                ("ac_type", models.CharField(choices=[
                    ("asset", "Asset"), ("liability", "Liability"),
                    ("equity", "Equity"), ("income", "Income"),
                    ("expense", "Expense")], max_length=10)),
                ("normal_balance", models.CharField(
                    choices=[("debit", "Debit"), ("credit", "Credit")],
                    default="debit", max_length=6)),
                ("is_active", models.BooleanField(default=True)),
                ("is_system", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="accounts", to="books_core.company")),
            ],
            options={
                "ordering": ("company", "code"),
                "indexes": [
                    models.Index(fields=["company", "ac_type"],
                                 name="account_company_type_idx"),
                    models.Index(fields=["company", "code"],
                                 name="account_company_code_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"),
                                            name="uq_company_account_code"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TaxRate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("rate_percent", models.DecimalField(
                    decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("is_active", models.BooleanField(default=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="tax_rates", to="books_core.company")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("company", "name"),
                                            name="uq_company_taxrate_name"),
                    models.CheckConstraint(
                        condition=models.Q(("rate_percent__gte", 0)),
                        name="taxrate_non_negative_percent"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=counterparty_fields() + [
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="customers", to="books_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"],
                                         name="customer_company_name_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "name"),
                                            name="uq_company_customer_name"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Vendor",
            fields=counterparty_fields() + [
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="vendors", to="books_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"],
                                         name="vendor_company_name_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "name"),
                                            name="uq_company_vendor_name"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("sku", models.CharField(blank=True, max_length=80, null=True)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, null=True)),
                ("unit_price", models.BigIntegerField(default=0)),
                ("is_service", models.BooleanField(default=True)),
                ("is_active", models.BooleanField(default=True)),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="items", to="books_core.company")),
                ("purchase_account", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="items_purchase_account",
                    to="books_core.account")),
                ("sales_account", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="items_sales_account",
                    to="books_core.account")),
                ("tax_rate", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="items", to="books_core.taxrate")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"],
                                         name="item_company_name_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "sku"),
                                            name="uq_company_item_sku"),
                    models.CheckConstraint(
                        condition=models.Q(("unit_price__gte", 0)),
                        name="item_non_negative_price"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DocumentSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("kind", models.CharField(choices=[
                    ("invoice", "INV"), ("bill", "BILL"),
                    ("sales_order", "SO")], max_length=20)),
                ("year", models.PositiveSmallIntegerField()),
                ("next_value", models.PositiveIntegerField(default=1)),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="sequences", to="books_core.company")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("company", "kind", "year"),
                        name="uq_company_sequence_kind_year"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SalesOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("number", models.CharField(max_length=32)),
                ("status", models.CharField(choices=[
                    ("draft", "Draft"), ("confirmed", "Confirmed"),
                    ("invoiced", "Invoiced")], default="draft", max_length=20)),
                ("issue_date", models.DateField()),
                ("due_date", models.DateField()),
                ("notes", models.TextField(blank=True, null=True)),
                ("subtotal", models.BigIntegerField(default=0)),
                ("tax_total", models.BigIntegerField(default=0)),
                ("total", models.BigIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="sales_orders", to="books_core.company")),
                ("currency", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="+", to="books_core.currency")),
                ("customer", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="sales_orders", to="books_core.customer")),
            ],
            options={
                "ordering": ("-issue_date", "-id"),
                "constraints": [
                    models.UniqueConstraint(fields=("company", "number"),
                                            name="uq_salesorder_company_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=document_fields("invoice") + [
                ("status", models.CharField(choices=INVOICE_STATUS,
                                            default="draft", max_length=20)),
                ("issued_at", models.DateTimeField(blank=True, null=True)),
                ("customer", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="invoices", to="books_core.customer")),
                ("sales_order", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="invoices", to="books_core.salesorder")),
            ],
            options={
                "ordering": ("-issue_date", "-id"),
                "indexes": [
                    models.Index(fields=["company", "status"],
                                 name="invoice_company_status_idx"),
                    models.Index(fields=["company", "customer"],
                                 name="invoice_company_cust_idx"),
                ],
                "constraints": document_constraints("invoice"),
            },
        ),
        migrations.CreateModel(
            name="Bill",
            fields=document_fields("bill") + [
                ("status", models.CharField(choices=BILL_STATUS,
                                            default="draft", max_length=20)),
                ("vendor_reference", models.CharField(blank=True, max_length=100,
                                                      null=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("vendor", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="bills", to="books_core.vendor")),
            ],
            options={
                "ordering": ("-issue_date", "-id"),
                "indexes": [
                    models.Index(fields=["company", "status"],
                                 name="bill_company_status_idx"),
                    models.Index(fields=["company", "vendor"],
                                 name="bill_company_vendor_idx"),
                ],
                "constraints": document_constraints("bill"),
            },
        ),
        migrations.CreateModel(
            name="InvoiceLine",
            fields=line_fields() + [
                ("invoice", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="lines", to="books_core.invoice")),
            ],
            options={
                "ordering": ("position", "id"),
                "indexes": [models.Index(fields=["invoice", "position"],
                                         name="invoiceline_position_idx")],
                "constraints": [line_constraint("invoiceline")],
            },
        ),
        migrations.CreateModel(
            name="BillLine",
            fields=line_fields() + [
                ("bill", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="lines", to="books_core.bill")),
            ],
            options={
                "ordering": ("position", "id"),
                "indexes": [models.Index(fields=["bill", "position"],
                                         name="billline_position_idx")],
                "constraints": [line_constraint("billline")],
            },
        ),
        migrations.CreateModel(
            name="SalesOrderLine",
            fields=line_fields() + [
                ("sales_order", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="lines", to="books_core.salesorder")),
            ],
            options={
                "ordering": ("position", "id"),
                "constraints": [line_constraint("salesorderline")],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("memo", models.CharField(max_length=400)),
                ("source", models.CharField(choices=[
                    ("invoice_issue", "Invoice issued"),
                    ("invoice_payment", "Invoice payment"),
                    ("invoice_void", "Invoice voided"),
                    ("bill_approve", "Bill approved"),
                    ("bill_payment", "Bill payment"),
                    ("bill_void", "Bill voided"),
                    ("manual", "Manual entry")], max_length=20)),
                ("source_id", models.BigIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="journal_entries", to="books_core.company")),
                ("created_by", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    to=settings.AUTH_USER_MODEL)),
                ("reverses", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="reversals", to="books_core.journalentry")),
            ],
            options={
                "verbose_name_plural": "journal entries",
                "ordering": ("date", "id"),
                "indexes": [
                    models.Index(fields=["company", "date"],
                                 name="je_company_date_idx"),
                    models.Index(fields=["company", "source", "source_id"],
                                 name="je_company_source_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField(default=0)),
                ("debit", models.BigIntegerField(default=0)),
                ("credit", models.BigIntegerField(default=0)),
                ("account", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="journal_lines", to="books_core.account")),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="journal_lines", to="books_core.company")),
                ("entry", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="lines", to="books_core.journalentry")),
            ],
            options={
                "ordering": ("entry", "position"),
                "indexes": [models.Index(fields=["company", "account"],
                                         name="jl_company_account_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("debit__gte", 0), ("credit__gte", 0)),
                        name="jl_non_negative_amounts"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("debit__gt", 0), ("credit", 0)),
                            models.Q(("credit__gt", 0), ("debit", 0)),
                            _connector="OR"),
                        name="jl_exactly_one_side"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("direction", models.CharField(choices=[
                    ("ar", "Customer receipt"), ("ap", "Vendor payment")],
                    max_length=2)),
                ("method", models.CharField(choices=[
                    ("cash", "Cash"), ("bank_transfer", "Bank transfer"),
                    ("card", "Card"), ("mobile_pay", "MobilePay"),
                    ("other", "Other")], default="other", max_length=20)),
                ("amount", models.BigIntegerField()),
                ("date", models.DateField()),
                ("reference", models.CharField(blank=True, max_length=200,
                                               null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="payments", to="books_core.company")),
                ("customer", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="payments", to="books_core.customer")),
                ("vendor", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="payments", to="books_core.vendor")),
                ("journal_entry", models.OneToOneField(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="payment", to="books_core.journalentry")),
            ],
            options={
                "ordering": ("-date", "-id"),
                "indexes": [
                    models.Index(fields=["company", "date"],
                                 name="payment_company_date_idx"),
                    models.Index(fields=["company", "direction"],
                                 name="payment_company_dir_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)),
                                           name="payment_positive_amount"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoicePayment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("amount", models.BigIntegerField()),
                ("invoice", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="payment_applications",
                    to="books_core.invoice")),
                ("payment", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="invoice_applications",
                    to="books_core.payment")),
            ],
            options={
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)),
                                           name="invoicepayment_positive_amount"),
                    models.UniqueConstraint(fields=("payment", "invoice"),
                                            name="uq_payment_invoice"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BillPayment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("amount", models.BigIntegerField()),
                ("bill", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="payment_applications",
                    to="books_core.bill")),
                ("payment", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="bill_applications",
                    to="books_core.payment")),
            ],
            options={
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)),
                                           name="billpayment_positive_amount"),
                    models.UniqueConstraint(fields=("payment", "bill"),
                                            name="uq_payment_bill"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    to="books_core.company")),
                ("user", models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["company", "user"],
                                 name="auditlog_company_user_idx"),
                    models.Index(fields=["company", "created_at"],
                                 name="auditlog_company_time_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccountBalanceSnapshot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True,
                                           serialize=False, verbose_name="ID")),
                ("snapshot_date", models.DateField()),
                ("debit_total", models.BigIntegerField(default=0)),
                ("credit_total", models.BigIntegerField(default=0)),
                ("balance", models.BigIntegerField(default=0)),
                ("refreshed_at", models.DateTimeField(auto_now=True)),
                ("account", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="snapshots", to="books_core.account")),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="balance_snapshots", to="books_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "snapshot_date"],
                                         name="snapshot_company_date_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("debit_total__gte", 0),
                                           ("credit_total__gte", 0)),
                        name="ab_snap_non_negative_amounts"),
                    models.UniqueConstraint(
                        fields=("company", "account", "snapshot_date"),
                        name="uq_company_account_snapshot_date"),
                ],
            },
        ),
    ]
