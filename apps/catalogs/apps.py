# apps/catalogs/apps.py
from django.apps import AppConfig


class CatalogsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.catalogs'
    label = 'catalogs'
    verbose_name = 'Catalogs'
