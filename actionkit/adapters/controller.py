"""Controller (HTTP endpoint) surface adapter.

Framework-neutral: the host extracts raw arguments from its request type and
renders the ``ControllerResult`` as its native JSON response.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping

from ..actions.base import Action
from ..actions.capabilities import CustomizesController, HandlesRequest, Surface
from ..exceptions import ConfigurationDefect, ValidationFailure
from ..logging import get_logger
from .base import BaseAdapter

logger = get_logger(__name__)


@dataclass
class ControllerResult:
    """Status code and JSON payload for one request."""
    status: int
    payload: Dict[str, Any]

    @property
    def success(self) -> bool:
        return bool(self.payload.get("success"))


class ControllerAdapter(BaseAdapter):
    """Exposes an action as a JSON endpoint."""

    surface = Surface.CONTROLLER

    def __init__(self, action: Action):
        super().__init__(action)
        self.middleware: List[Callable] = (
            action.get_controller_middleware() if isinstance(action, CustomizesController) else []
        )

    def respond(self, raw: Mapping[str, Any]) -> ControllerResult:
        """Run the shared pipeline and map the outcome to a result."""
        try:
            result = self.execute(raw)
            return ControllerResult(200, {"success": True, "data": result})
        except ValidationFailure as e:
            logger.warning(f"Validation failed for {self.action.identifier()}: {list(e.errors)}")
            return ControllerResult(422, {"success": False, "errors": e.errors})
        except ConfigurationDefect:
            raise
        except Exception as e:
            logger.exception(f"Action {self.action.identifier()} failed")
            return ControllerResult(500, {"success": False, "error": str(e)})

    def arguments(self, request: Any) -> Mapping[str, Any]:
        """Extract raw arguments from a host request."""
        if isinstance(request, Mapping):
            return request
        raise TypeError(f"Cannot read arguments from {type(request).__name__}")

    def render(self, result: ControllerResult) -> Any:
        """Convert a result into the host's response type."""
        return result

    def as_controller(self, request: Any) -> Any:
        """Handle one request end to end."""
        if isinstance(self.action, HandlesRequest):
            return self.action.as_controller(request)
        return self.render(self.respond(self.arguments(request)))
