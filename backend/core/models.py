"""
Core app models.

Provides abstract base models shared by the concrete tables of other apps.
"""

from django.db import models


class AuditedModel(models.Model):
    """
    Abstract base model carrying the platform audit block.

    Times are epoch milliseconds (as produced by the services and the
    workflow engine), not ``DateTimeField`` values, so the stored row can
    be compared with audit data echoed by collaborators without
    conversion.
    """

    created_by = models.CharField(
        max_length=64,
        db_column="createdby",
        verbose_name="Created By",
    )
    created_time = models.BigIntegerField(
        db_column="createdtime",
        verbose_name="Created Time (ms)",
        db_index=True,
    )
    last_modified_by = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        db_column="lastmodifiedby",
        verbose_name="Last Modified By",
    )
    last_modified_time = models.BigIntegerField(
        null=True,
        blank=True,
        db_column="lastmodifiedtime",
        verbose_name="Last Modified Time (ms)",
    )

    class Meta:
        abstract = True
