from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, BusinessProfile


class BusinessProfileInline(admin.StackedInline):
    model = BusinessProfile
    can_delete = False
    extra = 0


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    inlines = [BusinessProfileInline]
    list_display = ['username', 'email', 'name', 'is_staff']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Contact', {'fields': ['name', 'phone']}),
    )
