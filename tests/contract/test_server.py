"""
Contract tests for the MCP server surface.

The request handlers registered on the low-level server are invoked directly,
without a transport.
"""

import asyncio

import pytest
from mcp import types

from bluekit import __version__
from bluekit.server import INSTRUCTIONS, build_server


@pytest.fixture
def server():
    return build_server()


def handle(server, request):
    return asyncio.run(server.request_handlers[type(request)](request)).root


class TestServerContract:
    """Contract tests for tools and resources over MCP."""

    def test_identity(self, server):
        """Test the server name, version and instructions."""
        assert server.name == "bluekit"
        assert server.version == __version__
        assert "bluekit://prompts/get-kit-definition.md" in INSTRUCTIONS

    def test_list_tools(self, server):
        """Test tools are advertised with their input schemas."""
        result = handle(server, types.ListToolsRequest(method="tools/list"))

        names = [tool.name for tool in result.tools]
        assert "bluekit_ping" in names
        assert "bluekit.kit.generateKit" in names
        ping = next(tool for tool in result.tools if tool.name == "bluekit_ping")
        assert ping.inputSchema["type"] == "object"

    def test_call_ping(self, server):
        """Test a tool call returns text content."""
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="bluekit_ping", arguments={}),
        )

        result = handle(server, request)

        assert not result.isError
        assert result.content[0].text == "pong from BlueKit!"

    def test_call_failure_is_error_result(self, server):
        """Test handler errors come back as error results carrying the message."""
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="bluekit_kit_createKit", arguments={}),
        )

        result = handle(server, request)

        assert result.isError
        assert "description" in result.content[0].text

    def test_list_and_read_resources(self, server):
        """Test prompt documents are exposed as markdown resources."""
        listed = handle(server, types.ListResourcesRequest(method="resources/list"))
        names = [resource.name for resource in listed.resources]
        assert "Get Kit Definition" in names

        read = handle(
            server,
            types.ReadResourceRequest(
                method="resources/read",
                params=types.ReadResourceRequestParams(uri="bluekit://prompts/get-kit-definition.md"),
            ),
        )
        assert read.contents[0].text
        assert read.contents[0].mimeType == "text/markdown"
