from django.contrib import admin

from ..models import AuditLog
from .ReadOnly import ReadOnlyAdmin


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = ("created_at", "company", "user", "action", "object_type",
                    "object_id")
    list_filter = ("company", "action", "object_type")
    search_fields = ("object_id",)
