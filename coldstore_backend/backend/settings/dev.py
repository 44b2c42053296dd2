# backend/settings/dev.py
"""
LOCAL DEVELOPMENT SETTINGS

SQLite by default (DATABASE_URL overrides). Row locks are no-ops on SQLite,
so concurrent clearance behaviour is only meaningful against PostgreSQL.
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1"])
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=["http://localhost:3000"])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=["http://localhost:3000"])
CORS_ALLOW_CREDENTIALS = True

# print SQL when DEBUG_SQL=1
if env.bool("DEBUG_SQL", default=False):
    LOGGING["loggers"]["django.db.backends"] = {"handlers": ["console"], "level": "DEBUG"}
