from django.test import TestCase

from ..exceptions import AccountNotConfiguredError, NotFoundError
from ..models import Account, AccountType, Company, Item, TaxRate
from ..services import (AccountRole, ensure_system_accounts,
                        resolve_line_account, resolve_required,
                        seed_chart_of_accounts)
from .factories import LedgerSetupMixin


class AccountResolverTests(LedgerSetupMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.consulting = Account.objects.create(
            company=self.company, code="4100", name="Consulting",
            ac_type=AccountType.INCOME)
        self.item = Item.objects.create(
            company=self.company, name="Hosting", unit_price=5000,
            sales_account=self.consulting)

    def test_role_resolves_to_default_code(self):
        self.assertEqual(
            resolve_required(self.company, AccountRole.ACCOUNTS_RECEIVABLE).code,
            "1100")
        self.assertEqual(resolve_required(self.company, "2610").name, "Output VAT")

    def test_inactive_account_is_not_configured(self):
        bank = self.account("1010")
        bank.is_active = False
        bank.save()
        with self.assertRaises(AccountNotConfiguredError):
            resolve_required(self.company, AccountRole.BANK)

    def test_unknown_code_is_not_configured(self):
        with self.assertRaises(AccountNotConfiguredError):
            resolve_required(self.company, "9999")

    def test_override_wins_over_item_and_default(self):
        account = resolve_line_account(
            self.company, AccountRole.SALES, override="3000", item=self.item)
        self.assertEqual(account.code, "3000")

    def test_item_account_wins_over_default(self):
        account = resolve_line_account(
            self.company, AccountRole.SALES, item=self.item)
        self.assertEqual(account, self.consulting)

    def test_item_without_purchase_account_falls_back_to_role(self):
        account = resolve_line_account(
            self.company, AccountRole.OPERATING_EXPENSES, item=self.item)
        self.assertEqual(account.code, "5300")

    def test_missing_override_is_not_found(self):
        with self.assertRaises(NotFoundError):
            resolve_line_account(self.company, AccountRole.SALES, override="8888")

    def test_override_from_other_company_is_not_found(self):
        other = self.make_other_company()
        foreign = Account.objects.get(company=other, code="4000")
        with self.assertRaises(NotFoundError):
            resolve_line_account(self.company, AccountRole.SALES, override=foreign)

    def test_ensure_system_accounts_lists_every_missing_code(self):
        Account.objects.filter(company=self.company, code__in=["1010", "5710"]).update(
            is_active=False)
        with self.assertRaises(AccountNotConfiguredError) as ctx:
            ensure_system_accounts(self.company)
        self.assertIn("1010", ctx.exception.message)
        self.assertIn("5710", ctx.exception.message)

    def test_seed_is_idempotent(self):
        self.assertEqual(seed_chart_of_accounts(self.company), 0)
        self.assertEqual(
            Account.objects.filter(company=self.company, is_system=True).count(), 8)
        self.assertEqual(
            TaxRate.objects.filter(company=self.company, name="VAT 25%").count(), 1)

    def test_normal_balance_follows_type(self):
        self.assertEqual(self.account("1010").normal_balance, "debit")
        self.assertEqual(self.account("5710").normal_balance, "debit")
        self.assertEqual(self.account("4000").normal_balance, "credit")
        self.assertEqual(self.account("2100").normal_balance, "credit")

    def make_other_company(self):
        other = Company.objects.create(
            name="Other ApS", slug="other-aps", default_currency=self.dkk)
        seed_chart_of_accounts(other)
        return other
