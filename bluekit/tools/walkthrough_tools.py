"""Walkthrough tools: definition, generation instructions and writing."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..artifacts import ArtifactWriter
from ..models import ToolDefinition
from ..prompts import load_prompt
from .base import (
    ToolHandler,
    ToolResult,
    ToolSet,
    generation_instructions,
    object_schema,
    project_path_or_cwd,
    require_string,
    string_property,
    text_result,
)

WALKTHROUGH_FRONT_MATTER = """## Walkthrough File Format

**IMPORTANT**: All walkthroughs MUST start with YAML front matter:

```yaml
---
id: <walkthrough-id>
alias: <walkthrough-display-name>
type: walkthrough
is_base: false
version: <version-number>
tags: [<tag1>, <tag2>, ...]
description: "<walkthrough-description>"
---
```"""


class WalkthroughTools(ToolSet):
    """Tools for creating and saving walkthroughs."""

    def __init__(self, writer: Optional[ArtifactWriter] = None):
        self.writer = writer or ArtifactWriter()
        super().__init__()

    def create_definitions(self) -> List[ToolDefinition]:
        create_schema = object_schema(
            {
                "description": string_property("User description of the code to walk through"),
                "projectPath": string_property("Optional path to the project directory to analyze"),
            },
            ["description"],
        )
        generate_schema = object_schema(
            {
                "name": string_property("Name of the walkthrough file (without .md extension)"),
                "content": string_property("Walkthrough content (markdown with YAML front matter)"),
                "projectPath": string_property(
                    "Path to the project directory; the walkthrough is saved in its .bluekit directory"
                ),
            },
            ["name", "content", "projectPath"],
        )
        return [
            ToolDefinition("bluekit.walkthrough.getWalkthroughDefinition", "Get the full Walkthrough Definition text"),
            ToolDefinition("bluekit.getWalkthroughDefinition", "Get the full Walkthrough Definition text (legacy name)"),
            ToolDefinition(
                "bluekit.walkthrough.createWalkthrough",
                "Start the process of creating a walkthrough of existing code.",
                create_schema,
            ),
            ToolDefinition("bluekit.createWalkthrough", "Start creating a walkthrough (legacy name)", create_schema),
            ToolDefinition(
                "bluekit.walkthrough.generateWalkthrough",
                "Generate a walkthrough file in the .bluekit directory of the specified project path.",
                generate_schema,
            ),
            ToolDefinition("bluekit.generateWalkthrough", "Generate a walkthrough file (legacy name)", generate_schema),
        ]

    def create_handlers(self) -> Dict[str, ToolHandler]:
        return {
            "bluekit.walkthrough.getWalkthroughDefinition": self.get_definition,
            "bluekit.getWalkthroughDefinition": self.get_definition,
            "bluekit.walkthrough.createWalkthrough": self.create_walkthrough,
            "bluekit.createWalkthrough": self.create_walkthrough,
            "bluekit.walkthrough.generateWalkthrough": self.generate_walkthrough,
            "bluekit.generateWalkthrough": self.generate_walkthrough,
        }

    def get_definition(self, params: Dict[str, Any]) -> ToolResult:
        return text_result(load_prompt("get-walkthrough-definition.md"))

    def create_walkthrough(self, params: Dict[str, Any]) -> ToolResult:
        description = require_string(params, "description")
        body = "\n".join([
            "## Context for Walkthrough Generation",
            "",
            "### Walkthrough Definition",
            load_prompt("get-walkthrough-definition.md"),
            "",
            "## Your Task",
            "",
            "Read the code the user is asking about and explain it step by step,",
            "in execution order, naming the files and functions involved.",
            "",
            WALKTHROUGH_FRONT_MATTER,
        ])
        return text_result(generation_instructions(
            "Walkthrough",
            description,
            project_path_or_cwd(params),
            body,
            [
                "Generate the complete walkthrough with YAML front matter",
                "Use the `bluekit.walkthrough.generateWalkthrough` tool to save it in the project's .bluekit directory",
            ],
        ))

    def generate_walkthrough(self, params: Dict[str, Any]) -> ToolResult:
        path = self.writer.write(
            "walkthrough",
            require_string(params, "name"),
            require_string(params, "content"),
            require_string(params, "projectPath"),
        )
        return text_result(f"✅ Generated walkthrough: {path}")
