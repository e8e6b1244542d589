from django.contrib import admin, messages

from ..exceptions import BooksError
from ..services import approve_bill, issue_invoice, void_document

# ---------- Admin actions ----------
# Every action goes through the services so the admin can never bypass
# the lifecycle rules or skip a posting.


def _run(modeladmin, request, queryset, verb, call):
    done = 0
    user = request.user if request.user.is_authenticated else None
    for doc in queryset:
        try:
            call(doc, user)
            done += 1
        except BooksError as exc:
            modeladmin.message_user(
                request, f"{doc}: {exc.message}", level=messages.ERROR)
    # Final summary message
    modeladmin.message_user(
        request,
        f"{verb} {done} of {len(queryset)} documents.",
        level=messages.SUCCESS if done == len(queryset) else messages.WARNING,
    )


@admin.action(description="Issue selected invoices")
def issue_invoices(modeladmin, request, queryset):
    _run(modeladmin, request, queryset, "Issued",
         lambda inv, user: issue_invoice(inv.company_id, inv.pk, user=user))


@admin.action(description="Approve selected bills")
def approve_bills(modeladmin, request, queryset):
    _run(modeladmin, request, queryset, "Approved",
         lambda bill, user: approve_bill(bill.company_id, bill.pk, user=user))


""" Voids post a reversing entry unless the document is still a draft """


@admin.action(description="Void selected documents")
def void_documents(modeladmin, request, queryset):
    kind = queryset.model._meta.model_name  # "invoice" / "bill"
    _run(modeladmin, request, queryset, "Voided",
         lambda doc, user: void_document(doc.company_id, kind, doc.pk, user=user))
