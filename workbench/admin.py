"""Django admin configuration for the workbench project."""

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from actionkit import make
from actionkit_django.admin import ActionModelAdmin

from .actions import UpdateUserStatus

User = get_user_model()

admin.site.unregister(User)


@admin.register(User)
class UserAdmin(ActionModelAdmin, BaseUserAdmin):
    """User admin offering the workbench actions on the changelist."""

    def actions(self, request=None):
        return [make(UpdateUserStatus)]
