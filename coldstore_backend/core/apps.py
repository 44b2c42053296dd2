# core/apps.py

"""
CORE APP CONFIG

Shared building blocks used by every cold storage app:
- domain error taxonomy (core.exceptions)
- API envelope (exception handler + pagination)
- money / quantity normalizers
- reference data cache
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Cold Storage Core"
