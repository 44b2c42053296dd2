# backend/settings/__init__.py
"""
Settings package.

Nothing is imported here; DJANGO_SETTINGS_MODULE picks the layer:
- backend.settings.dev   local development + test runs (SQLite by default)
- backend.settings.prod  deployed API (PostgreSQL, whitenoise, HTTPS)
"""
