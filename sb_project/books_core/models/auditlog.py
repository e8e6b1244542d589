from django.conf import settings
from django.db import models
from ..managers import TenantManager
from .company import Company


class AuditLog(models.Model):
    """
    One row per ledger mutation (issue, approve, pay, void, manual post,
    catalog edits). Written by services.audit_helper.log_action inside the
    same transaction, so a rolled-back mutation leaves no trace here either.
    """

    company = models.ForeignKey(
        Company, null=True, blank=True, on_delete=models.SET_NULL)
    # Empty for celery tasks and management commands
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL)

    action = models.CharField(max_length=50)  # "issue", "pay", "void", ...
    object_type = models.CharField(max_length=100)  # model name, "Invoice"
    object_id = models.CharField(max_length=100)
    # e.g. {"number": "INV-2025-0001", "entry": 12}
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["company", "user"],
                         name="auditlog_company_user_idx"),
            models.Index(fields=["company", "created_at"],
                         name="auditlog_company_time_idx"),
        ]

    def __str__(self):
        who = self.user or "system"
        return (f"[{self.created_at:%Y-%m-%d %H:%M}] {who} "
                f"{self.action} {self.object_type}({self.object_id})")
