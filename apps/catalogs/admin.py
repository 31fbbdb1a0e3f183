# apps/catalogs/admin.py
from django.contrib import admin
from .models import DigitalCatalog, ReplicatedCatalog


@admin.register(DigitalCatalog)
class DigitalCatalogAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name', 'owner__username']
    raw_id_fields = ['owner']


@admin.register(ReplicatedCatalog)
class ReplicatedCatalogAdmin(admin.ModelAdmin):
    list_display = ['original_catalog', 'distributor', 'is_active', 'created_at']
    list_filter = ['is_active']
    raw_id_fields = ['original_catalog', 'distributor']
