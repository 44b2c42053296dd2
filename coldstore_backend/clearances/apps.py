# clearances/apps.py

from django.apps import AppConfig


class ClearancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "clearances"
    verbose_name = "Clearances"
