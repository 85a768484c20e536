"""App configuration for actionkit_django."""

import logging

from django.apps import AppConfig
from django.utils.module_loading import autodiscover_modules

logger = logging.getLogger(__name__)


class ActionkitDjangoConfig(AppConfig):
    """Wires actions into Django at startup.

    - admin actions are decorated with ``AdminActionDecorator``
    - ORM-backed validation rules are registered
    - model instances serialize as entity references
    - ``actions`` modules of installed apps are imported so their
      ``@register_action`` classes reach the registry
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "actionkit_django"
    verbose_name = "Actions"

    def ready(self):
        from actionkit.actions import get_validation_engine, set_entity_resolver
        from actionkit.recognition import ToolRecognizer, UIActionRecognizer, configure_action_manager

        from .admin import AdminActionDecorator
        from .entities import ModelEntityResolver
        from .rules import register_rules

        configure_action_manager([
            UIActionRecognizer(decorator=AdminActionDecorator),
            ToolRecognizer(),
        ])
        register_rules(get_validation_engine())
        set_entity_resolver(ModelEntityResolver())
        autodiscover_modules("actions")

        logger.debug("Actionkit wired into Django")
