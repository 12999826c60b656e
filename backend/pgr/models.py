"""
Grievance tables.

These models describe the logical schema that ``PGRQueryBuilder`` targets
with raw SQL.  Table and column names are the platform's wire names so
that the same queries run unchanged against a shared database.
"""

from django.db import models

from core.models import AuditedModel


class Service(AuditedModel):
    """One grievance row.  ``id`` is a uuid assigned on create."""

    id = models.CharField(
        primary_key=True,
        max_length=64,
        verbose_name="Id",
    )
    tenant_id = models.CharField(
        max_length=256,
        db_column="tenantid",
        verbose_name="Tenant",
    )
    service_code = models.CharField(
        max_length=256,
        db_column="servicecode",
        verbose_name="Service Code",
    )
    service_request_id = models.CharField(
        max_length=128,
        unique=True,
        db_column="servicerequestid",
        verbose_name="Service Request Id",
    )
    description = models.TextField(
        blank=True,
        null=True,
        verbose_name="Description",
    )
    account_id = models.CharField(
        max_length=256,
        db_column="accountid",
        verbose_name="Reporter Account Id",
        db_index=True,
    )
    additional_details = models.JSONField(
        null=True,
        blank=True,
        db_column="additionaldetails",
        verbose_name="Additional Details",
    )
    application_status = models.CharField(
        max_length=128,
        db_column="applicationstatus",
        verbose_name="Application Status",
    )
    rating = models.SmallIntegerField(
        null=True,
        blank=True,
        verbose_name="Rating",
    )
    source = models.CharField(
        max_length=256,
        verbose_name="Source",
    )
    active = models.BooleanField(
        default=True,
        verbose_name="Active",
    )

    class Meta:
        db_table = "eg_pgr_service_v2"
        verbose_name = "Grievance"
        verbose_name_plural = "Grievances"
        indexes = [
            models.Index(fields=["tenant_id", "application_status"], name="eg_pgr_serv_tenanti_6f3c1a_idx"),
            models.Index(fields=["service_code"], name="eg_pgr_serv_service_0b8e2d_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.service_request_id} [{self.application_status}]"


class Address(AuditedModel):
    """The grievance location.  Exactly one per grievance."""

    id = models.CharField(
        primary_key=True,
        max_length=64,
        verbose_name="Id",
    )
    tenant_id = models.CharField(max_length=256, db_column="tenantid")
    parent = models.OneToOneField(
        Service,
        on_delete=models.CASCADE,
        db_column="parentid",
        related_name="address",
    )
    door_no = models.CharField(max_length=128, null=True, blank=True, db_column="doorno")
    plot_no = models.CharField(max_length=256, null=True, blank=True, db_column="plotno")
    building_name = models.CharField(max_length=1024, null=True, blank=True, db_column="buildingname")
    street = models.CharField(max_length=1024, null=True, blank=True)
    landmark = models.CharField(max_length=1024, null=True, blank=True)
    city = models.CharField(max_length=512, null=True, blank=True)
    district = models.CharField(max_length=512, null=True, blank=True)
    region = models.CharField(max_length=512, null=True, blank=True)
    state = models.CharField(max_length=512, null=True, blank=True)
    country = models.CharField(max_length=512, null=True, blank=True)
    pincode = models.CharField(max_length=16, null=True, blank=True)
    locality = models.CharField(max_length=128, null=True, blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    additional_details = models.JSONField(
        null=True,
        blank=True,
        db_column="additionaldetails",
    )

    class Meta:
        db_table = "eg_pgr_address_v2"
        verbose_name = "Grievance Address"
        verbose_name_plural = "Grievance Addresses"

    def __str__(self) -> str:
        return f"{self.locality or ''} ({self.tenant_id})"
