from django.contrib import admin

from ..models import JournalEntry
from .inlines import JournalLineInline
from .ReadOnly import ReadOnlyAdmin


# Posted entries are append-only: view them, never edit them
@admin.register(JournalEntry)
class JournalEntryAdmin(ReadOnlyAdmin):
    list_display = ("id", "company", "date", "source", "source_id", "memo",
                    "reverses", "created_by")
    list_filter = ("company", "source", "date")
    search_fields = ("memo",)
    date_hierarchy = "date"
    inlines = [JournalLineInline]

    def get_queryset(self, request):
        return (super().get_queryset(request)
                .select_related("company", "reverses", "created_by"))
