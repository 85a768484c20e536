"""Django admin integration.

``ActionModelAdmin`` lets a ``ModelAdmin`` list its actions from an
``actions()`` method. Actions resolved there are recognized as admin actions
and wrapped in ``AdminActionDecorator``, which Django calls like any other
admin action function.

Example::

    @admin.register(User)
    class UserAdmin(ActionModelAdmin, admin.ModelAdmin):
        def actions(self, request=None):
            return [make(UpdateUserStatus)]
"""

import logging
from typing import Any, Dict, List

from django.contrib import messages
from django.contrib.admin import helpers
from django.http import HttpResponseRedirect
from django.template.response import TemplateResponse

from actionkit.actions.base import Action
from actionkit.adapters.ui import UIActionAdapter
from actionkit.recognition import ResolvesActions
from actionkit.responses import UIResponse

from .forms import build_form_class, submitted_values

logger = logging.getLogger(__name__)

APPLY_FIELD = "apply"
FORM_TEMPLATE = "actionkit/action_form.html"


def message_level(response: UIResponse) -> int:
    return messages.ERROR if response.is_danger else messages.SUCCESS


class AdminActionDecorator:
    """Admin action function backed by a ``UIActionAdapter``.

    Django calls it as ``func(modeladmin, request, queryset)``. Actions with
    parameters first render an intermediate form; the submitted values are
    then validated by the action's own rules.
    """

    def __init__(self, action: Action):
        self.adapter = UIActionAdapter(action)
        self.__name__ = self.adapter.uri_key
        self.short_description = self.adapter.name

    @property
    def action(self) -> Action:
        return self.adapter.action

    def fields(self):
        return self.adapter.fields()

    def __call__(self, modeladmin, request, queryset):
        form_class = build_form_class(self.fields())

        if form_class.base_fields and APPLY_FIELD not in request.POST:
            return self.render_form(modeladmin, request, queryset, form_class())

        values = submitted_values(form_class, request.POST, request.FILES)
        response = self.adapter.handle(values, list(queryset))
        return self.respond(modeladmin, request, response)

    def render_form(self, modeladmin, request, queryset, form):
        opts = modeladmin.model._meta
        context: Dict[str, Any] = {
            **modeladmin.admin_site.each_context(request),
            "title": self.adapter.name,
            "opts": opts,
            "form": form,
            "queryset": queryset,
            "action_name": self.__name__,
            "action_checkbox_name": helpers.ACTION_CHECKBOX_NAME,
            "selected": request.POST.getlist(helpers.ACTION_CHECKBOX_NAME),
            "select_across": request.POST.get("select_across", "0"),
            "apply_field": APPLY_FIELD,
        }
        return TemplateResponse(request, FORM_TEMPLATE, context)

    def respond(self, modeladmin, request, response: UIResponse):
        """Translate a ``UIResponse`` into admin messages or a redirect."""
        if response.kind in ("redirect", "download"):
            return HttpResponseRedirect(response.url)

        level = message_level(response)
        for line in response.text.splitlines() or [""]:
            modeladmin.message_user(request, line, level=level)
        return None

    def __repr__(self) -> str:
        return f"<AdminActionDecorator {self.__name__}>"


class ActionModelAdmin(ResolvesActions):
    """ModelAdmin mixin listing actions from an ``actions()`` method.

    Must precede ``admin.ModelAdmin`` in the bases so ``actions`` resolves to
    the method rather than Django's class attribute.
    """

    def actions(self, request=None) -> List[Any]:
        """Actions offered on the changelist."""
        return []

    def _get_base_actions(self):
        """Return the list of actions, prior to any request-based filtering."""
        actions = []
        base_actions = (self.get_action(action) for action in self.actions() or [])
        # get_action might have returned None, so filter any of those out.
        base_actions = [action for action in base_actions if action]
        base_action_names = {name for _, name, _ in base_actions}

        # Gather actions from the admin site first
        for name, func in self.admin_site.actions:
            if name in base_action_names:
                continue
            description = self._get_action_description(func, name)
            actions.append((func, name, description))
        # Add actions from this ModelAdmin.
        actions.extend(base_actions)
        return actions


