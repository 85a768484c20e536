"""Tests for tool servers and the MCP binding."""

import json

import pytest
from mcp import types

from actionkit.actions.capabilities import CustomizesTool
from actionkit.exceptions import ConfigurationDefect
from actionkit.recognition import ActionManager, ToolRecognizer
from actionkit.tools import ServerContext, ToolServer
from actionkit.tools.mcp import ToolCallError, ToolNotFoundError, build_mcp_server, call, describe_tool
from samples import EmptyResult, ResetPassword, Undocumented, UpdateUserStatus, reset_calls
from workbench.mcp import PlatformServer

VALID_RESET = {
    "email": "jane@acme.io",
    "password": "s3cret!pass",
    "password_confirmation": "s3cret!pass",
}


class Unlisted(CustomizesTool, UpdateUserStatus):
    """Not offered to agents."""

    should_register_tool = False


class SampleServer(ToolServer):
    name = "Sample Server"
    instructions = "Sample tools."
    tools = [ResetPassword, EmptyResult, Unlisted]


@pytest.fixture(autouse=True)
def clear_calls():
    reset_calls()
    yield


@pytest.fixture
def context():
    return ServerContext(SampleServer(), ActionManager([ToolRecognizer()]))


class TestToolServer:
    """Tests for ToolServer defaults."""

    def test_identity(self):
        server = SampleServer()
        assert server.get_name() == "Sample Server"
        assert server.get_version() == "1.0.0"
        assert server.get_instructions() == "Sample tools."

    def test_defaults_from_settings(self, monkeypatch):
        from actionkit.config import reload_settings

        monkeypatch.setenv("ACTIONS_MCP_SERVER_NAME", "custom-mcp")
        reload_settings()

        server = ToolServer()
        assert server.get_name() == "custom-mcp"
        assert server.get_instructions() is None


class TestServerContext:
    """Tests for resolving a server's tools."""

    def test_tools_are_adapters_keyed_by_name(self, context):
        tools = context.tools()
        assert list(tools) == ["reset-password", "empty-result"]

    def test_undescribed_tool_is_a_configuration_defect(self):
        class Broken(ToolServer):
            tools = [Undocumented]

        context = ServerContext(Broken(), ActionManager([ToolRecognizer()]))
        with pytest.raises(ConfigurationDefect):
            context.tools()

    def test_duplicate_names_keep_first(self):
        class Twice(ToolServer):
            tools = [ResetPassword, ResetPassword]

        tools = ServerContext(Twice(), ActionManager([ToolRecognizer()])).tools()
        assert list(tools) == ["reset-password"]

    def test_workbench_server(self):
        tools = ServerContext(PlatformServer()).tools()
        assert list(tools) == ["reset-password"]
        assert tools["reset-password"].description.startswith("Reset a user's password.")


class TestMCPBinding:
    """Tests for the MCP call path."""

    def test_describe_tool(self, context):
        tool = describe_tool(context.tools()["reset-password"])
        assert tool.name == "reset-password"
        assert tool.title == "Reset Password"
        assert tool.inputSchema["required"] == ["email", "password", "password_confirmation"]

    def test_call_returns_text_content(self, context):
        [content] = call(context, "reset-password", VALID_RESET)
        assert isinstance(content, types.TextContent)
        assert json.loads(content.text)["success"] is True

    def test_call_validation_failure_raises(self, context):
        with pytest.raises(ToolCallError, match="The email field is required."):
            call(context, "reset-password", None)
        assert ResetPassword.calls == []

    def test_call_empty_result_raises(self, context):
        with pytest.raises(ToolCallError, match="Something went wrong while executing the tool."):
            call(context, "empty-result", {})

    def test_call_unknown_tool(self, context):
        with pytest.raises(ToolNotFoundError):
            call(context, "unlisted", {})

    async def test_list_tools_handler(self, context):
        server = build_mcp_server(SampleServer(), context)

        result = await server.request_handlers[types.ListToolsRequest](
            types.ListToolsRequest(method="tools/list")
        )

        assert [tool.name for tool in result.root.tools] == ["reset-password", "empty-result"]
