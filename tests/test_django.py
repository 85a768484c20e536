"""Tests for the Django host: forms, views, admin actions and commands.

None of these tests touch the database.
"""

import json
from unittest.mock import Mock

import pytest
from django import forms
from django.contrib import admin, messages
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.http import HttpResponseRedirect, QueryDict
from django.template.response import TemplateResponse
from django.test import RequestFactory
from django.urls import reverse

from actionkit.actions import Surface, get_action_registry
from actionkit.actions.capabilities import CustomizesController
from actionkit.actions.validation import RuleContext
from actionkit.adapters import CommandAdapter, UIActionAdapter
from actionkit.exceptions import ConfigurationDefect
from actionkit.responses import UIResponse
from actionkit.schema.fields import FieldDescriptor
from actionkit_django.admin import FORM_TEMPLATE, AdminActionDecorator
from actionkit_django.commands import ActionCommand, positional_options
from actionkit_django.entities import ModelEntityResolver
from actionkit_django.forms import build_form_class, form_field, submitted_values
from actionkit_django.management.commands.runmcp import Command as RunMCPCommand
from actionkit_django.rules import rule_exists
from actionkit_django.views import as_view
from conftest import FakePrompter
from samples import EmptyResult, ResetPassword, UpdateUserStatus, reset_calls

VALID_RESET = {
    "email": "jane@acme.io",
    "password": "s3cret!pass",
    "password_confirmation": "s3cret!pass",
}


@pytest.fixture(autouse=True)
def clear_calls():
    reset_calls()
    yield


@pytest.fixture
def rf():
    return RequestFactory()


@pytest.fixture
def modeladmin():
    modeladmin = Mock()
    modeladmin.admin_site.each_context.return_value = {}
    return modeladmin


class TestForms:
    """Tests for field descriptor -> Django form field rendering."""

    def test_form_class_fields(self):
        form_class = build_form_class(UIActionAdapter(UpdateUserStatus()).fields())

        fields = form_class.base_fields
        assert list(fields) == ["status", "reason", "notify"]
        assert isinstance(fields["status"], forms.CharField)
        assert fields["status"].required is True
        assert isinstance(fields["reason"].widget, forms.Textarea)
        assert isinstance(fields["notify"], forms.BooleanField)
        assert fields["notify"].required is False

    def test_select_fields(self):
        single = form_field(FieldDescriptor(name="owner", kind="select", label="Owner", options={"1": "Jane"}))
        multiple = form_field(FieldDescriptor(
            name="tags", kind="select", label="Tags", options={"a": "A"}, multiple=True,
        ))
        assert isinstance(single, forms.ChoiceField)
        assert single.choices[0] == ("", "---------")
        assert isinstance(multiple, forms.MultipleChoiceField)

    def test_decimal_number_field(self):
        field = form_field(FieldDescriptor(name="price", kind="number", label="Price", step="0.01"))
        assert isinstance(field, forms.DecimalField)
        assert field.widget.attrs["step"] == "0.01"

    def test_unknown_kind_renders_text(self):
        assert isinstance(form_field(FieldDescriptor(name="x", kind="gizmo", label="X")), forms.CharField)

    def test_submitted_values_are_raw(self):
        form_class = build_form_class([
            FieldDescriptor(name="status", kind="text", label="Status"),
            FieldDescriptor(name="tags", kind="select", label="Tags", options={"a": "A", "b": "B"}, multiple=True),
            FieldDescriptor(name="notify", kind="boolean", label="Notify"),
            FieldDescriptor(name="reason", kind="textarea", label="Reason"),
        ])
        data = QueryDict("status=archived&tags=a&tags=b&notify=on")

        assert submitted_values(form_class, data) == {
            "status": "archived",
            "tags": ["a", "b"],
            "notify": True,
        }


class TestViews:
    """Tests for JSON controller views."""

    def test_json_body_success(self, rf):
        request = rf.post("/api/reset-password/", data=json.dumps(VALID_RESET), content_type="application/json")

        response = as_view(ResetPassword)(request)

        assert response.status_code == 200
        assert json.loads(response.content) == {
            "success": True,
            "data": {"success": True, "message": "Password reset successfully."},
        }

    def test_validation_failure_is_422(self, rf):
        request = rf.post("/api/reset-password/", data=json.dumps({}), content_type="application/json")

        response = as_view(ResetPassword)(request)

        assert response.status_code == 422
        body = json.loads(response.content)
        assert body["success"] is False
        assert body["errors"]["email"] == ["The email field is required."]
        assert ResetPassword.calls == []

    def test_missing_confirmation_is_422(self, rf):
        payload = {"email": "jane@acme.io", "password": "s3cret!pass"}
        request = rf.post("/api/reset-password/", data=json.dumps(payload), content_type="application/json")

        response = as_view(ResetPassword)(request)

        assert response.status_code == 422
        errors = json.loads(response.content)["errors"]
        assert errors["password_confirmation"] == ["The password confirmation field is required."]
        assert errors["password"] == ["The password field confirmation does not match."]
        assert ResetPassword.calls == []

    def test_malformed_json_is_400(self, rf):
        request = rf.post("/api/reset-password/", data="{oops", content_type="application/json")
        response = as_view(ResetPassword)(request)
        assert response.status_code == 400
        assert json.loads(response.content)["success"] is False

    def test_query_string_and_form_data(self, rf):
        response = as_view(UpdateUserStatus)(rf.get("/api/update-user-status/", {"status": "active"}))
        assert response.status_code == 200
        assert UpdateUserStatus.calls[0]["status"] == "active"

    def test_views_are_csrf_exempt(self):
        assert as_view(ResetPassword).csrf_exempt is True

    def test_middleware_applied_in_order(self, rf):
        applied = []

        def tag(label):
            def decorator(view):
                applied.append(label)
                return view
            return decorator

        class Audited(CustomizesController, UpdateUserStatus):
            controller_middleware = [tag("first"), tag("second")]

        as_view(Audited)
        assert applied == ["first", "second"]

    def test_registered_routes(self):
        assert reverse("actions:reset-password") == "/api/reset-password/"


class TestAdminActionDecorator:
    """Tests for the admin action wrapper."""

    def test_identity(self):
        decorator = AdminActionDecorator(UpdateUserStatus())
        assert decorator.__name__ == "update-user-status"
        assert decorator.short_description == "Update User Status"

    def test_parameters_render_intermediate_form(self, rf, modeladmin):
        request = rf.post("/admin/", {"action": "update-user-status", "_selected_action": ["1"]})

        response = AdminActionDecorator(UpdateUserStatus())(modeladmin, request, [object()])

        assert isinstance(response, TemplateResponse)
        assert response.template_name == FORM_TEMPLATE
        assert response.context_data["selected"] == ["1"]
        assert UpdateUserStatus.calls == []

    def test_applied_form_runs_action(self, rf, modeladmin):
        record = object()
        request = rf.post("/admin/", {"apply": "1", "status": "active"})

        response = AdminActionDecorator(UpdateUserStatus())(modeladmin, request, [record])

        assert response is None
        assert UpdateUserStatus.calls[0]["model"] is record
        modeladmin.message_user.assert_called_once_with(
            request, "Action completed successfully.", level=messages.SUCCESS,
        )

    def test_action_without_parameters_runs_immediately(self, rf, modeladmin):
        request = rf.post("/admin/", {})

        AdminActionDecorator(EmptyResult())(modeladmin, request, [object()])

        modeladmin.message_user.assert_called_once_with(
            request, "Something went wrong, please try again later.", level=messages.ERROR,
        )

    def test_redirect_response(self, rf, modeladmin):
        decorator = AdminActionDecorator(UpdateUserStatus())
        response = decorator.respond(modeladmin, rf.get("/"), UIResponse.redirect("/done/"))
        assert isinstance(response, HttpResponseRedirect)
        assert response.url == "/done/"

    def test_download_response_redirects_to_file(self, rf, modeladmin):
        decorator = AdminActionDecorator(UpdateUserStatus())
        response = decorator.respond(modeladmin, rf.get("/"), UIResponse.download("users.csv", "/exports/users.csv"))
        assert isinstance(response, HttpResponseRedirect)
        assert response.url == "/exports/users.csv"
        modeladmin.message_user.assert_not_called()

    def test_user_admin_lists_decorated_action(self):
        model_admin = admin.site._registry[get_user_model()]

        actions = {name: func for func, name, _ in model_admin._get_base_actions()}

        assert isinstance(actions["update-user-status"], AdminActionDecorator)
        assert "delete_selected" in actions


class TestWorkbench:
    """Tests for the workbench wiring."""

    def test_reset_password_is_registered(self):
        registry = get_action_registry()
        assert "reset-password" in registry.for_surface(Surface.COMMAND)
        assert "reset-password" not in registry.for_surface(Surface.UI_ACTION)

    def test_update_user_status_prefill(self):
        from workbench.actions import UpdateUserStatus as WorkbenchUpdateUserStatus

        fields = UIActionAdapter(WorkbenchUpdateUserStatus()).fields()
        assert fields[0].default == "active"
        assert fields[1].kind == "textarea"

    def test_update_user_status_without_users(self):
        from workbench.actions import UpdateUserStatus as WorkbenchUpdateUserStatus

        response = UIActionAdapter(WorkbenchUpdateUserStatus()).handle({"status": "inactive"}, [])
        assert response.is_danger


class TestModelIntegration:
    """Tests for the ORM-facing helpers."""

    def test_entity_references(self):
        resolver = ModelEntityResolver()
        user = get_user_model()(pk=5)

        assert resolver.to_reference("auth.User", user) == {"entity": "auth.User", "pk": 5}
        assert resolver.to_reference("auth.User", "plain") == "plain"
        assert resolver.from_reference("auth.User", 5) == 5

    def test_exists_rule_needs_model(self):
        ctx = RuleContext("email", "jane@acme.io", [], {}, ["exists"])
        with pytest.raises(ConfigurationDefect, match="needs a model label"):
            rule_exists(ctx)

    def test_exists_rule_unknown_model(self):
        ctx = RuleContext("email", "jane@acme.io", ["nowhere.Nothing"], {}, ["exists"])
        with pytest.raises(ConfigurationDefect, match="Unknown model"):
            rule_exists(ctx)


class TestCommands:
    """Tests for the management command surface."""

    def test_positional_options(self):
        adapter = CommandAdapter(ResetPassword())
        assert positional_options(adapter, ["jane@acme.io"]) == {
            "email": "jane@acme.io",
            "password": None,
            "password_confirmation": None,
        }

    def test_too_many_arguments(self):
        adapter = CommandAdapter(UpdateUserStatus())
        with pytest.raises(CommandError, match="Too many arguments"):
            positional_options(adapter, ["a", "b", "c", "d"])

    def test_run_action(self):
        prompter = FakePrompter()
        code = ActionCommand().run_action(ResetPassword, list(VALID_RESET.values()), prompter)

        assert code == 0
        assert prompter.infos == ["Done."]

    def test_run_action_prompts_for_missing(self):
        prompter = FakePrompter(answers=["s3cret!pass", "s3cret!pass"])
        code = ActionCommand().run_action(ResetPassword, ["jane@acme.io"], prompter)

        assert code == 0
        assert prompter.questions == ["The new password", "The new password, repeated"]

    def test_action_command_help(self):
        class ResetCommand(ActionCommand):
            action_class = ResetPassword

        assert ResetCommand().help.startswith("Reset a user's password.\nParameters:")

    def test_failed_exit_raises(self):
        with pytest.raises(CommandError):
            ActionCommand().exit(1)

    def test_unknown_identifier(self):
        with pytest.raises(CommandError, match="Unknown action 'nope'"):
            call_command("action", "nope")

    def test_missing_identifier(self):
        with pytest.raises(CommandError, match="identifier is required"):
            call_command("action")


class TestRunMCP:
    """Tests for the runmcp command's server loading."""

    def test_load_server_from_path(self):
        server = RunMCPCommand().load_server("workbench.mcp.PlatformServer")
        assert server.get_name() == "Platform Server"

    def test_load_server_unconfigured(self):
        with pytest.raises(CommandError, match="No tool server configured"):
            RunMCPCommand().load_server(None)

    def test_load_server_bad_path(self):
        with pytest.raises(CommandError, match="Cannot import"):
            RunMCPCommand().load_server("workbench.mcp.Missing")
