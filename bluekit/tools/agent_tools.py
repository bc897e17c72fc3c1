"""Agent tools: definition, generation instructions and agent writing."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..artifacts import ArtifactWriter
from ..frontmatter import metadata_warnings
from ..models import ToolDefinition
from ..prompts import load_prompt
from .base import (
    ToolHandler,
    ToolResult,
    ToolSet,
    format_warnings,
    generation_instructions,
    object_schema,
    project_path_or_cwd,
    require_string,
    string_property,
    text_result,
)


class AgentTools(ToolSet):
    """Tools for creating and saving agent personas."""

    def __init__(self, writer: Optional[ArtifactWriter] = None):
        self.writer = writer or ArtifactWriter()
        super().__init__()

    def create_definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition("bluekit_agent_getAgentDefinition", "Get the full Agent Definition text"),
            ToolDefinition(
                "bluekit_agent_createAgent",
                "Start the process of creating a new agent. Provides instructions for generating an "
                "agent with all required metadata (tags, description, capabilities).",
                object_schema(
                    {
                        "description": string_property("User description of the agent they want"),
                        "projectPath": string_property("Optional path to the project directory"),
                    },
                    ["description"],
                ),
            ),
            ToolDefinition(
                "bluekit_agent_generateAgent",
                "Generate an agent file in the .bluekit/agents directory of the specified project path. "
                "Call this AFTER creating the agent content with YAML front matter including tags, "
                "description and exactly 3 capabilities.",
                object_schema(
                    {
                        "name": string_property("Name of the agent file (without .md extension)"),
                        "content": string_property("Agent content (markdown with YAML front matter)"),
                        "projectPath": string_property("Path to the project directory"),
                    },
                    ["name", "content", "projectPath"],
                ),
            ),
        ]

    def create_handlers(self) -> Dict[str, ToolHandler]:
        return {
            "bluekit_agent_getAgentDefinition": self.get_definition,
            "bluekit_agent_createAgent": self.create_agent,
            "bluekit_agent_generateAgent": self.generate_agent,
        }

    def get_definition(self, params: Dict[str, Any]) -> ToolResult:
        return text_result(load_prompt("get-agent-definition.md"))

    def create_agent(self, params: Dict[str, Any]) -> ToolResult:
        description = require_string(params, "description")
        body = "\n".join([
            "## Agent Definition",
            load_prompt("get-agent-definition.md"),
            "",
            "## Your Task",
            "",
            "Create a complete agent definition based on the user's description. The YAML front",
            "matter MUST fill in `tags` (1-3), `description` and exactly 3 `capabilities`;",
            "`executionNotes` is optional. `type` is always `agent`.",
            "",
            "**CRITICAL**: Do NOT leave `tags`, `description`, or `capabilities` empty.",
        ])
        return text_result(generation_instructions(
            "Agent",
            description,
            project_path_or_cwd(params),
            body,
            [
                "Generate the complete agent content with YAML front matter",
                "Ensure tags, description, and capabilities are meaningful and filled out",
                "Use the `bluekit_agent_generateAgent` tool to save the agent",
            ],
        ))

    def generate_agent(self, params: Dict[str, Any]) -> ToolResult:
        name = require_string(params, "name")
        content = require_string(params, "content")
        project_path = require_string(params, "projectPath")

        prepared = self.writer.prepare("agent", name, content)
        path = self.writer.write_prepared("agent", name, prepared, project_path)
        warnings = metadata_warnings("agent", prepared)
        return text_result(f"✅ Generated agent: {path}{format_warnings(warnings)}")
