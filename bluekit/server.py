"""MCP server exposing the BlueKit tools and prompt resources over stdio."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import Resource, TextContent, Tool

from . import __version__
from .bluekit_logging import setup_logging_from_env
from .dispatch import ToolDispatcher
from .prompts import list_prompt_resources, read_prompt_resource
from .tools import default_tool_sets

logger = logging.getLogger("bluekit.server")

SERVER_NAME = "bluekit"

INSTRUCTIONS = """BlueKit MCP Server - AI-assisted development artifact management

## Available Resources (Definitions)
Read these resources to understand how to generate each artifact type:
- bluekit://prompts/get-agent-definition.md - Agent structure and requirements
- bluekit://prompts/get-blueprint-definition.md - Blueprint JSON structure
- bluekit://prompts/get-kit-definition.md - Kit structure and requirements
- bluekit://prompts/get-walkthrough-definition.md - Walkthrough structure and requirements

## Workflow for Generating Artifacts
- Kit: read the kit definition, generate the content, call bluekit_kit_generateKit with name, content and projectPath
- Walkthrough: read the walkthrough definition, call bluekit_walkthrough_generateWalkthrough
- Agent: read the agent definition, call bluekit_agent_generateAgent
- Diagram: call bluekit_diagram_createDiagram for guidance, then bluekit_diagram_generateDiagram
- Blueprint: read the blueprint definition, call bluekit_blueprint_generateBlueprint with the
  blueprint object and the content of every task file

## Other Tools
- bluekit_blueprint_listBlueprints / bluekit_blueprint_getBlueprint - read blueprints
- bluekit_task_executeTask - execution briefing for one blueprint task
- bluekit_clone_register / bluekit_clone_createProject - snapshot and reuse git projects
- bluekit_init_project - link a project to the BlueKit store
- bluekit_batchExecute - run several tools in order
- bluekit_ping - health check

Always read the appropriate definition resource before generating content."""


def _to_text_content(result: List[Dict[str, Any]]) -> List[TextContent]:
    return [TextContent(type="text", text=block["text"]) for block in result]


def build_server(dispatcher: Optional[ToolDispatcher] = None) -> Server:
    """Wire a dispatcher and the prompt resources into an MCP ``Server``."""

    dispatcher = dispatcher or ToolDispatcher(default_tool_sets())
    server = Server(SERVER_NAME, version=__version__, instructions=INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [
            Tool(name=definition.name, description=definition.description, inputSchema=definition.input_schema)
            for definition in dispatcher.definitions()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        try:
            result = await dispatcher.call(name, arguments or {})
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}")
            raise
        return _to_text_content(result)

    @server.list_resources()
    async def list_resources() -> List[Resource]:
        return [
            Resource(uri=resource.uri, name=resource.name, description=resource.description, mimeType=resource.mime_type)
            for resource in list_prompt_resources()
        ]

    @server.read_resource()
    async def read_resource(uri: Any) -> List[ReadResourceContents]:
        return [ReadResourceContents(content=read_prompt_resource(str(uri)), mime_type="text/markdown")]

    return server


async def run() -> None:
    server = build_server()
    logger.info("BlueKit MCP server running on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    setup_logging_from_env()
    asyncio.run(run())


if __name__ == "__main__":
    main()
