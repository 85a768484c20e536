"""UI-action surface adapter.

Maps an action onto an admin-panel action:

- name() -> action title
- identifier() -> URI key
- parameters() + prefill() -> form field descriptors
"""

from typing import Any, List, Mapping, Sequence

from ..actions.base import Action
from ..actions.capabilities import CustomizesAdminAction, HandlesAdminAction, Surface
from ..config import get_settings
from ..exceptions import ConfigurationDefect, ValidationFailure
from ..logging import get_logger
from ..naming import class_headline, class_slug
from ..responses import UIResponse
from ..schema.fields import FieldDescriptor, fields_for
from .base import BaseAdapter

logger = get_logger(__name__)


def inject_models(fields: Mapping[str, Any], models: Sequence[Any]) -> dict:
    """Submitted values plus the records in scope.

    One record goes under ``model``; any other count under ``models``.
    """
    attributes = dict(fields)
    models = list(models)
    if len(models) == 1:
        attributes["model"] = models[0]
    else:
        attributes["models"] = models
    return attributes


class UIActionAdapter(BaseAdapter):
    """Exposes an action as a bulk action on selected records."""

    surface = Surface.UI_ACTION

    def __init__(self, action: Action):
        super().__init__(action)
        self.name = self.resolve_identity(
            CustomizesAdminAction, "get_action_title", action.name, class_headline(action)
        )
        self.uri_key = self.resolve_identity(
            CustomizesAdminAction, "get_action_uri_key", action.identifier, class_slug(action)
        )

    def fields(self) -> List[FieldDescriptor]:
        """Form field descriptors for the action's parameters."""
        return fields_for(self.action.get_parameters(), self.action.get_prefill())

    def handle(self, fields: Mapping[str, Any], models: Sequence[Any]) -> UIResponse:
        """Perform the action on the selected records.

        Args:
            fields: Submitted form values keyed by parameter name
            models: Records selected in the UI

        Returns:
            A message, danger, redirect or download response
        """
        if isinstance(self.action, HandlesAdminAction):
            return self.action.as_admin_action(fields, models)

        settings = get_settings()
        try:
            result = self.execute(inject_models(fields, models))
        except ValidationFailure as e:
            logger.warning(f"Validation failed for {self.uri_key}: {list(e.errors)}")
            return UIResponse.danger(e.summary())
        except ConfigurationDefect:
            raise
        except Exception as e:
            logger.exception(f"Admin action {self.uri_key} failed")
            return UIResponse.danger(str(e))

        if not result:
            return UIResponse.danger(settings.ui_failure_message)

        message = result.get("message") if isinstance(result, Mapping) else None
        return UIResponse.message(message or settings.ui_success_message)
