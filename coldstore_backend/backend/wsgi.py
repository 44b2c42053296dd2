# backend/wsgi.py
"""
WSGI entrypoint for the cold storage API (gunicorn backend.wsgi).

Production MUST export DJANGO_SETTINGS_MODULE=backend.settings.prod:
clearance commits rely on PostgreSQL row locks, which the dev SQLite
database does not provide.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
