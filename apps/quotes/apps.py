# apps/quotes/apps.py
from django.apps import AppConfig


class QuotesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.quotes'
    label = 'quotes'
    verbose_name = 'Quotes'
