"""Tests for call-site recognition."""

import pytest

from actionkit.actions import Surface
from actionkit.adapters import ToolAdapter, UIActionAdapter
from actionkit.exceptions import ConfigurationDefect
from actionkit.recognition import (
    ActionManager,
    Backtrace,
    BacktraceFrame,
    ResolvesActions,
    ResolvesPrimitives,
    ToolRecognizer,
    UIActionRecognizer,
    find_declaring_class,
)
from actionkit.tools import ServerContext, ToolServer
from samples import ResetPassword, UpdateUserStatus


@pytest.fixture
def manager():
    return ActionManager([UIActionRecognizer(), ToolRecognizer()])


class UserResource(ResolvesActions):
    def __init__(self, manager):
        self.manager = manager

    def actions(self):
        return [self.manager.make(UpdateUserStatus)]

    def render_template_actions(self):
        return [self.manager.make(UpdateUserStatus)]


class StaffResource(UserResource):
    pass


class NotAResource:
    def __init__(self, manager):
        self.manager = manager

    def actions(self):
        return [self.manager.make(UpdateUserStatus)]


class Primitives(ResolvesPrimitives):
    pass


def tool_frames(receiver):
    return Backtrace([BacktraceFrame("resolve_primitives", receiver=receiver, declaring_class=type(receiver))])


class TestBacktrace:
    """Tests for Backtrace and BacktraceFrame."""

    def test_capture_starts_at_caller(self):
        def inner():
            return Backtrace.capture(10)

        backtrace = inner()
        assert backtrace.frames[0].function == "inner"
        assert backtrace.frames[1].function == "test_capture_starts_at_caller"

    def test_capture_respects_limit(self):
        assert len(Backtrace.capture(2)) == 2

    def test_method_frames_record_receiver_and_declaring_class(self):
        class Probe:
            def look(self):
                return Backtrace.capture(1)

        probe = Probe()
        frame = probe.look().frames[0]
        assert frame.receiver is probe
        assert frame.declaring_class is Probe

    def test_inherited_method_declared_by_parent(self):
        code = UserResource.actions.__code__
        assert find_declaring_class(StaffResource, code) is UserResource

    def test_callers_drop_anchor_and_internal_frames(self):
        backtrace = Backtrace(
            [
                BacktraceFrame("capture", module="internal"),
                BacktraceFrame("identify_and_decorate", module="internal"),
                BacktraceFrame("make", module="internal"),
                BacktraceFrame("actions", module="app"),
            ],
            anchor="identify_and_decorate",
            internal_modules=("internal",),
        )
        assert [frame.function for frame in backtrace.callers()] == ["actions"]


class TestToolRecognizer:
    """Tests for ToolRecognizer classification."""

    def test_resolve_primitives_on_context(self):
        assert ToolRecognizer().classify(tool_frames(Primitives())) is Surface.TOOL

    def test_resolve_primitives_on_other_receiver(self):
        assert ToolRecognizer().classify(tool_frames(object())) is None

    def test_resolve_primitives_without_receiver(self):
        backtrace = Backtrace([BacktraceFrame("resolve_primitives")])
        assert ToolRecognizer().classify(backtrace) is None

    def test_empty_backtrace(self):
        assert ToolRecognizer().classify(Backtrace()) is None

    def test_other_function_name(self):
        backtrace = Backtrace([BacktraceFrame("tools", receiver=Primitives())])
        assert ToolRecognizer().classify(backtrace) is None


class TestUIActionRecognizer:
    """Tests for UIActionRecognizer classification."""

    def test_actions_on_resource(self):
        resource = UserResource(None)
        backtrace = Backtrace([BacktraceFrame("actions", receiver=resource, declaring_class=UserResource)])
        assert UIActionRecognizer().classify(backtrace) is Surface.UI_ACTION

    def test_other_resource_method_rejects(self):
        resource = UserResource(None)
        backtrace = Backtrace([
            BacktraceFrame("render_template_actions", receiver=resource, declaring_class=UserResource),
            BacktraceFrame("actions", receiver=resource, declaring_class=UserResource),
        ])
        assert UIActionRecognizer().classify(backtrace) is None

    def test_frames_without_receiver_are_skipped(self):
        resource = UserResource(None)
        backtrace = Backtrace([
            BacktraceFrame("helper"),
            BacktraceFrame("actions", receiver=resource, declaring_class=UserResource),
        ])
        assert UIActionRecognizer().classify(backtrace) is Surface.UI_ACTION


class TestActionManager:
    """Tests for ActionManager resolution on real call stacks."""

    def test_resource_actions_are_decorated(self, manager):
        [action] = UserResource(manager).actions()
        assert isinstance(action, UIActionAdapter)
        assert action.uri_key == "update-user-status"

    def test_other_resource_methods_are_not_decorated(self, manager):
        [action] = UserResource(manager).render_template_actions()
        assert isinstance(action, UpdateUserStatus)

    def test_inherited_actions_are_decorated(self, manager):
        [action] = StaffResource(manager).actions()
        assert isinstance(action, UIActionAdapter)

    def test_non_resource_receiver_is_not_decorated(self, manager):
        [action] = NotAResource(manager).actions()
        assert isinstance(action, UpdateUserStatus)

    def test_plain_call_returns_plain_instance(self, manager):
        action = manager.make(ResetPassword)
        assert type(action) is ResetPassword

    def test_server_context_resolves_tools(self, manager):
        class Server(ToolServer):
            tools = [ResetPassword]

        [tool] = ServerContext(Server(), manager).resolve_primitives()
        assert isinstance(tool, ToolAdapter)
        assert tool.name == "reset-password"

    def test_unsupported_surface_is_skipped(self, manager):
        class CommandOnly(UpdateUserStatus):
            surfaces = frozenset({Surface.COMMAND})

        class Resource(UserResource):
            def actions(self):
                return [self.manager.make(CommandOnly)]

        [action] = Resource(manager).actions()
        assert type(action) is CommandOnly

    def test_classify_first_match_wins(self):
        class Always(ToolRecognizer):
            def matches(self, backtrace):
                return True

        manager = ActionManager([Always(), UIActionRecognizer()])
        assert manager.classify(Backtrace()) is Surface.TOOL

    def test_classify_without_match(self, manager):
        assert manager.classify(Backtrace()) is None

    def test_custom_decorator(self):
        decorated = []

        def decorator(action):
            decorated.append(action)
            return "decorated"

        manager = ActionManager([UIActionRecognizer(decorator=decorator)])
        assert UserResource(manager).actions() == ["decorated"]
        assert isinstance(decorated[0], UpdateUserStatus)

    def test_register_after_freeze_raises(self, manager):
        manager.freeze()
        assert manager.frozen
        with pytest.raises(ConfigurationDefect, match="frozen"):
            manager.register_recognizer(ToolRecognizer())
