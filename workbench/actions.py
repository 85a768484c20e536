"""Demo actions for the workbench project.

``ResetPassword`` is registered for the command, controller and tool
surfaces; ``UpdateUserStatus`` is offered as an admin action on users.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from actionkit.actions import Action, CustomizesTool, Surface, register_action

logger = logging.getLogger(__name__)


@register_action
class ResetPassword(CustomizesTool, Action):
    """Resets the password of the user with the given email address."""

    surfaces = frozenset({Surface.COMMAND, Surface.CONTROLLER, Surface.TOOL})

    tool_description = (
        "Reset a user's password. Requires the user's email address, "
        "a new password of at least 8 characters and its confirmation."
    )

    def parameters(self):
        return [
            {
                "name": "email",
                "description": "The email address of the user",
                "type": "string",
                "rules": ["required", "email", "exists:auth.User,email"],
            },
            {
                "name": "password",
                "description": "The new password",
                "type": "password",
                "rules": ["required", "string", "min:8", "confirmed"],
            },
            {
                "name": "password_confirmation",
                "description": "The new password, repeated",
                "type": "password",
                "rules": ["required", "string"],
            },
        ]

    def handle(self, attributes):
        user = get_user_model()._default_manager.get(email=attributes["email"])
        user.set_password(attributes["password"])
        user.save(update_fields=["password"])

        logger.info(f"Password reset for user {user.pk}")
        return {"success": True, "message": "Password reset successfully."}


class UpdateUserStatus(Action):
    """Activates or deactivates the selected users."""

    surfaces = frozenset({Surface.UI_ACTION})

    def parameters(self):
        return [
            {
                "name": "status",
                "description": "The new status for the users",
                "type": "string",
                "rules": ["required", "string", "in:active,inactive"],
            },
            {
                "name": "reason",
                "description": "Optional reason for the status change",
                "type": "text",
                "rules": ["nullable", "string", "max:500"],
            },
        ]

    def prefill(self):
        return {"status": {"default": "active", "options": ["active", "inactive"]}}

    def handle(self, attributes):
        users = [attributes["model"]] if "model" in attributes else list(attributes.get("models", []))
        if not users:
            return {}

        is_active = attributes["status"] == "active"
        with transaction.atomic():
            for user in users:
                user.is_active = is_active
                user.save(update_fields=["is_active"])

        logger.info(
            f"Set status '{attributes['status']}' on {len(users)} user(s)"
            + (f": {attributes['reason']}" if attributes.get("reason") else "")
        )
        return {
            "success": True,
            "message": f"Updated {len(users)} user(s) to {attributes['status']}.",
        }
