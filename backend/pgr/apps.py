from django.apps import AppConfig


class PgrAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pgr"
    verbose_name = "Public Grievance Redressal"
