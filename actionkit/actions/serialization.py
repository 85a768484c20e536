"""Serialization of action attributes for queued execution.

Only entity-typed parameters participate: their values are replaced by a
durable reference on serialize and restored on deserialize. Everything else
passes through unchanged.
"""

from typing import Any, Dict, Optional

from ..logging import get_logger

logger = get_logger(__name__)


class EntityResolver:
    """Turns entity instances into durable references and back.

    The default resolver keeps values as they are. Hosts install a real one
    with ``set_entity_resolver`` (the Django app installs a model resolver).
    """

    def to_reference(self, type_name: str, value: Any) -> Any:
        return value

    def from_reference(self, type_name: str, reference: Any) -> Any:
        return reference


_resolver: EntityResolver = EntityResolver()


def get_entity_resolver() -> EntityResolver:
    return _resolver


def set_entity_resolver(resolver: EntityResolver) -> None:
    """Install the process-wide entity resolver."""
    global _resolver
    _resolver = resolver
    logger.debug(f"Entity resolver set to {type(resolver).__name__}")


class SerializesEntities:
    """Mixin giving actions a pickle state made of their attributes.

    Classes using it provide ``get_parameters()`` and ``_attributes``.
    """

    def entity_parameters(self) -> Dict[str, str]:
        """Names of entity-typed parameters mapped to their entity type."""
        return {
            parameter.name: parameter.type
            for parameter in self.get_parameters()
            if parameter.is_entity
        }

    def serialize_attributes(self, attributes: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        attributes = dict(attributes if attributes is not None else getattr(self, "_attributes", {}))
        resolver = get_entity_resolver()
        for name, type_name in self.entity_parameters().items():
            if name in attributes:
                attributes[name] = self._map_entity(resolver.to_reference, type_name, attributes[name])
        return attributes

    def restore_attributes(self, attributes: Dict[str, Any]) -> Dict[str, Any]:
        attributes = dict(attributes)
        resolver = get_entity_resolver()
        for name, type_name in self.entity_parameters().items():
            if name in attributes:
                attributes[name] = self._map_entity(resolver.from_reference, type_name, attributes[name])
        return attributes

    @staticmethod
    def _map_entity(convert, type_name: str, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [convert(type_name, item) for item in value]
        return convert(type_name, value)

    def __getstate__(self) -> Dict[str, Any]:
        return {"attributes": self.serialize_attributes()}

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self._attributes = self.restore_attributes(state.get("attributes", {}))
