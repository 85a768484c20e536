"""Entity resolver storing Django model instances as durable references."""

from typing import Any

from django.apps import apps
from django.db import models

from actionkit.actions.serialization import EntityResolver


class ModelEntityResolver(EntityResolver):
    """Serializes model instances as ``{"entity": label, "pk": pk}``."""

    def to_reference(self, type_name: str, value: Any) -> Any:
        if isinstance(value, models.Model):
            return {"entity": value._meta.label, "pk": value.pk}
        return value

    def from_reference(self, type_name: str, reference: Any) -> Any:
        if not (isinstance(reference, dict) and "entity" in reference and "pk" in reference):
            return reference
        model = apps.get_model(reference["entity"])
        return model._default_manager.get(pk=reference["pk"])
