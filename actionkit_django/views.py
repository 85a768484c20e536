"""JSON controller views for actions.

``as_view(ResetPassword)`` returns a Django view that builds a fresh action
per request, reads arguments from the JSON body (or the query string merged
with form data) and answers with ``JsonResponse``.
"""

import json
import logging
from typing import Any, Dict, Mapping, Type

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from actionkit.actions.base import Action
from actionkit.adapters.controller import ControllerAdapter, ControllerResult

logger = logging.getLogger(__name__)


class InvalidBody(ValueError):
    """Raised when a JSON request body cannot be decoded into an object."""
    pass


def _query_dict_to_dict(data) -> Dict[str, Any]:
    values = {}
    for key in data:
        items = data.getlist(key)
        values[key] = items if len(items) > 1 else items[0]
    return values


def request_arguments(request) -> Dict[str, Any]:
    """Raw arguments of a Django request.

    JSON bodies are used as-is; otherwise form data is merged over the query
    string. URL keyword arguments are added last.

    Raises:
        InvalidBody: If a JSON body is malformed or not an object
    """
    if request.content_type == "application/json":
        try:
            body = json.loads(request.body or b"{}")
        except json.JSONDecodeError as e:
            raise InvalidBody(f"Invalid JSON: {e}") from e
        if not isinstance(body, dict):
            raise InvalidBody("JSON body must be an object")
        arguments = body
    else:
        arguments = _query_dict_to_dict(request.GET)
        arguments.update(_query_dict_to_dict(request.POST))
        arguments.pop("csrfmiddlewaretoken", None)
        arguments.update(request.FILES.dict())

    resolver_match = getattr(request, "resolver_match", None)
    if resolver_match is not None:
        arguments.update(resolver_match.kwargs)
    return arguments


class DjangoControllerAdapter(ControllerAdapter):
    """Controller adapter speaking Django requests and ``JsonResponse``."""

    def arguments(self, request: Any) -> Mapping[str, Any]:
        if isinstance(request, Mapping):
            return request
        return request_arguments(request)

    def render(self, result: ControllerResult) -> JsonResponse:
        return JsonResponse(result.payload, status=result.status)

    def as_controller(self, request: Any) -> Any:
        try:
            return super().as_controller(request)
        except InvalidBody as e:
            logger.warning(f"Rejected request to {self.action.identifier()}: {e}")
            return JsonResponse({"success": False, "error": str(e)}, status=400)


def as_view(action_class: Type[Action]):
    """Build a view function serving ``action_class`` as a JSON endpoint.

    The action's controller middleware (view decorators) is applied in list
    order around the view.
    """
    middleware = DjangoControllerAdapter(action_class()).middleware

    def view(request, *args, **kwargs):
        return DjangoControllerAdapter(action_class()).as_controller(request)

    view.__name__ = f"{action_class.__name__}View"
    view.__doc__ = action_class.__doc__

    for decorator in middleware:
        view = decorator(view)
    return csrf_exempt(view)
