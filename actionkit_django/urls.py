"""URL patterns for registered actions.

Every registered action taking part in the controller surface is served at
``<identifier>/``. Include it from a project URLconf::

    path("actions/", include("actionkit_django.urls")),
"""

from django.urls import path

from actionkit.actions import Surface, get_action_registry

from .views import as_view

app_name = "actions"


def action_urlpatterns():
    """One route per controller-capable registered action."""
    registry = get_action_registry()
    return [
        path(f"{identifier}/", as_view(action_class), name=identifier)
        for identifier, action_class in registry.for_surface(Surface.CONTROLLER).items()
    ]


urlpatterns = action_urlpatterns()
