from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import (Account, Bill, BillPayment, Invoice, InvoicePayment,
                     JournalEntry, JournalLine)

""" Block invoice deletion if any payments are applied."""


# pre_delete signal auto-fires just before Django deletes a model instance
# it’s connected to the Invoice model
@receiver(pre_delete, sender=Invoice)
def prevent_delete_invoice_with_payments(sender, instance, **kwargs):
    if InvoicePayment.objects.filter(invoice=instance).exists():
        raise ValidationError("Cannot delete invoice with applied payments.")
    # Issued invoices are reversed by voiding, never deleted
    if instance.number:
        raise ValidationError("Cannot delete an issued invoice; void it instead.")


"""Block bill deletion if any payments are applied."""


@receiver(pre_delete, sender=Bill)
def prevent_delete_bill_with_payments(sender, instance, **kwargs):
    if BillPayment.objects.filter(bill=instance).exists():
        raise ValidationError("Cannot delete bill with applied payments.")
    if instance.number:
        raise ValidationError("Cannot delete an approved bill; void it instead.")


"""Block deletion if account has ever been used in a journal line."""


@receiver(pre_delete, sender=Account)
def prevent_delete_account_with_journal_lines(sender, instance, **kwargs):
    if JournalLine.objects.filter(account=instance).exists():
        raise ValidationError("Cannot delete account used in journal lines.")


"""The journal is append-only: corrections are new offsetting entries."""


@receiver(pre_delete, sender=JournalEntry)
def prevent_delete_journal_entry(sender, instance, **kwargs):
    raise ValidationError("Journal entries cannot be deleted.")


@receiver(pre_delete, sender=JournalLine)
def prevent_delete_journal_line(sender, instance, **kwargs):
    raise ValidationError("Journal lines cannot be deleted.")
