"""
WSGI config for catalogo project.

It exposes the WSGI callable as a module-level variable named ``application``.
Gunicorn serves HTTP through this entry point (see gunicorn.conf.py).
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'catalogo.settings')

application = get_wsgi_application()
