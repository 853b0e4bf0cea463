"""WSGI entry point for the daily spin backend."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "daily_spin.settings")

application = get_wsgi_application()
