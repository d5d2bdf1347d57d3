"""
WSGI config for the Joiner PRO backend.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'joinerpro.config.settings')

application = get_wsgi_application()
