from django.db import models

# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):
        return self.filter(company=company)

    def active(self, company):
        return self.filter(
                            company=company,  # enforce tenant scoping
                            is_active=True    # only fetch active records
                        )
    # Enables query:
    # Account.objects.active(company)


class TenantManager(models.Manager):

    def get_queryset(self):  # every model gets TenantQuerySet (so .for_company() is always available)
        return TenantQuerySet(self.model, using=self._db)

    def for_company(self, company):
        return self.get_queryset().for_company(company)

    def active(self, company):
        return self.get_queryset().active(company)


# Live documents that still carry an open balance (drafts are not owed yet)
class OpenDocumentQuerySet(TenantQuerySet):
    def open_items(self, company):
        return self.filter(company=company, balance__gt=0).exclude(
            status__in=("draft", "void"))


class DocumentManager(TenantManager):

    def get_queryset(self):
        return OpenDocumentQuerySet(self.model, using=self._db)

    def open_items(self, company):
        return self.get_queryset().open_items(company)
