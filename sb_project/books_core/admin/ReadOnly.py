from django.contrib import admin


class ReadOnlyAdmin(admin.ModelAdmin):
    """
    Browse-only admin for rows that services own: journal entries,
    payments, sequences, snapshots and the audit trail. Changing them
    here would bypass ledger_mutation, so staff get the view permission only.
    """

    list_per_page = 50

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
