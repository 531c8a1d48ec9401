"""
WSGI config for the Resource Sharing marketplace.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'resource_sharing.settings')

application = get_wsgi_application()
