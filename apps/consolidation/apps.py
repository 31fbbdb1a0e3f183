# apps/consolidation/apps.py
from django.apps import AppConfig


class ConsolidationConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.consolidation'
    label = 'consolidation'
    verbose_name = 'Consolidated Orders'
