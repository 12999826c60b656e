import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Service",
            fields=[
                ("created_by", models.CharField(db_column="createdby", max_length=64, verbose_name="Created By")),
                ("created_time", models.BigIntegerField(db_column="createdtime", db_index=True, verbose_name="Created Time (ms)")),
                ("last_modified_by", models.CharField(blank=True, db_column="lastmodifiedby", max_length=64, null=True, verbose_name="Last Modified By")),
                ("last_modified_time", models.BigIntegerField(blank=True, db_column="lastmodifiedtime", null=True, verbose_name="Last Modified Time (ms)")),
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False, verbose_name="Id")),
                ("tenant_id", models.CharField(db_column="tenantid", max_length=256, verbose_name="Tenant")),
                ("service_code", models.CharField(db_column="servicecode", max_length=256, verbose_name="Service Code")),
                ("service_request_id", models.CharField(db_column="servicerequestid", max_length=128, unique=True, verbose_name="Service Request Id")),
                ("description", models.TextField(blank=True, null=True, verbose_name="Description")),
                ("account_id", models.CharField(db_column="accountid", db_index=True, max_length=256, verbose_name="Reporter Account Id")),
                ("additional_details", models.JSONField(blank=True, db_column="additionaldetails", null=True, verbose_name="Additional Details")),
                ("application_status", models.CharField(db_column="applicationstatus", max_length=128, verbose_name="Application Status")),
                ("rating", models.SmallIntegerField(blank=True, null=True, verbose_name="Rating")),
                ("source", models.CharField(max_length=256, verbose_name="Source")),
                ("active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Grievance",
                "verbose_name_plural": "Grievances",
                "db_table": "eg_pgr_service_v2",
                "indexes": [
                    models.Index(fields=["tenant_id", "application_status"], name="eg_pgr_serv_tenanti_6f3c1a_idx"),
                    models.Index(fields=["service_code"], name="eg_pgr_serv_service_0b8e2d_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Address",
            fields=[
                ("created_by", models.CharField(db_column="createdby", max_length=64, verbose_name="Created By")),
                ("created_time", models.BigIntegerField(db_column="createdtime", db_index=True, verbose_name="Created Time (ms)")),
                ("last_modified_by", models.CharField(blank=True, db_column="lastmodifiedby", max_length=64, null=True, verbose_name="Last Modified By")),
                ("last_modified_time", models.BigIntegerField(blank=True, db_column="lastmodifiedtime", null=True, verbose_name="Last Modified Time (ms)")),
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False, verbose_name="Id")),
                ("tenant_id", models.CharField(db_column="tenantid", max_length=256)),
                ("door_no", models.CharField(blank=True, db_column="doorno", max_length=128, null=True)),
                ("plot_no", models.CharField(blank=True, db_column="plotno", max_length=256, null=True)),
                ("building_name", models.CharField(blank=True, db_column="buildingname", max_length=1024, null=True)),
                ("street", models.CharField(blank=True, max_length=1024, null=True)),
                ("landmark", models.CharField(blank=True, max_length=1024, null=True)),
                ("city", models.CharField(blank=True, max_length=512, null=True)),
                ("district", models.CharField(blank=True, max_length=512, null=True)),
                ("region", models.CharField(blank=True, max_length=512, null=True)),
                ("state", models.CharField(blank=True, max_length=512, null=True)),
                ("country", models.CharField(blank=True, max_length=512, null=True)),
                ("pincode", models.CharField(blank=True, max_length=16, null=True)),
                ("locality", models.CharField(blank=True, max_length=128, null=True)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
                ("additional_details", models.JSONField(blank=True, db_column="additionaldetails", null=True)),
                (
                    "parent",
                    models.OneToOneField(
                        db_column="parentid",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="address",
                        to="pgr.service",
                    ),
                ),
            ],
            options={
                "verbose_name": "Grievance Address",
                "verbose_name_plural": "Grievance Addresses",
                "db_table": "eg_pgr_address_v2",
            },
        ),
    ]
