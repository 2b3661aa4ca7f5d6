"""
WSGI entry point do SevenBoard.

    gunicorn sevenboard.config.wsgi:application
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'sevenboard.config.settings')

application = get_wsgi_application()
