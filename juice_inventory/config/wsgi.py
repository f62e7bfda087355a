"""
WSGI config for the juice inventory dashboard API.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'juice_inventory.config.settings')

application = get_wsgi_application()
