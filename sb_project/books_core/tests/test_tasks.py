import datetime

from django.test import TestCase
from sb_project.celery import celery_app

from ..models import AccountBalanceSnapshot, JournalEntry, JournalLine
from ..tasks import rebuild_balance_snapshots, verify_ledger
from .factories import LedgerSetupMixin


class LedgerTaskTests(LedgerSetupMixin, TestCase):

    def test_verify_ledger_reports_healthy_books(self):
        self.issued_invoice()
        self.approved_bill()
        summary = verify_ledger(self.company.pk)
        self.assertEqual(summary["entries"], 2)
        self.assertTrue(summary["balanced"])
        self.assertTrue(summary["equation_balanced"])
        self.assertIsNone(summary["error"])

    def test_verify_ledger_flags_a_tampered_entry(self):
        invoice = self.issued_invoice()
        entry = JournalEntry.objects.get(source_id=invoice.pk)
        # bypass the model guards the way a bad migration would
        JournalLine.objects.filter(entry=entry, debit__gt=0).update(debit=1)
        summary = verify_ledger.delay(self.company.pk).get()
        self.assertFalse(summary["balanced"])
        self.assertIn(str(entry.pk), summary["error"])

    def test_snapshots_are_rebuilt_per_day(self):
        self.issued_invoice()
        written = rebuild_balance_snapshots(self.company.pk, "2025-03-31")
        self.assertEqual(written, 8)
        ar = AccountBalanceSnapshot.objects.get(
            company=self.company, account__code="1100")
        self.assertEqual((ar.debit_total, ar.credit_total, ar.balance),
                         (25000, 0, 25000))
        sales = AccountBalanceSnapshot.objects.get(account__code="4000")
        self.assertEqual(sales.balance, 20000)

        # running again replaces rather than duplicates
        rebuild_balance_snapshots(self.company.pk, datetime.date(2025, 3, 31))
        self.assertEqual(AccountBalanceSnapshot.objects.count(), 8)

    def test_snapshot_before_any_posting_is_zero(self):
        self.issued_invoice()
        rebuild_balance_snapshots(self.company.pk, "2025-01-01")
        self.assertFalse(AccountBalanceSnapshot.objects.exclude(balance=0).exists())


class CeleryRoutingTests(TestCase):

    def test_ledger_tasks_go_to_the_default_queue(self):
        # "celery -A sb_project worker" only consumes the default queue
        route = celery_app.amqp.router.route({}, verify_ledger.name)
        self.assertEqual(route["queue"].name, celery_app.conf.task_default_queue)
