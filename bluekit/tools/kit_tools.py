"""Kit tools: definition, generation instructions and kit writing."""

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

KIT_FRONT_MATTER = """## Kit File Format

**IMPORTANT**: All kits MUST start with YAML front matter containing the following fields:

```yaml
---
id: <kit-id>
alias: <kit-display-name>
type: kit
is_base: <true|false>
version: <version-number>
tags: [<tag1>, <tag2>, ...]
description: "<kit-description>"
---
```

The YAML front matter should be followed by the kit content (markdown)."""


def _create_schema() -> Dict[str, Any]:
    return object_schema(
        {
            "description": string_property("User description of what they want to turn into a kit"),
            "projectPath": string_property("Optional path to the project directory to analyze"),
        },
        ["description"],
    )


def _generate_schema() -> Dict[str, Any]:
    return object_schema(
        {
            "name": string_property("Name of the kit file (without .md extension)"),
            "content": string_property("Kit content (markdown with YAML front matter)"),
            "projectPath": string_property(
                "Path to the project directory; the kit is saved in .bluekit/kits within it"
            ),
        },
        ["name", "content", "projectPath"],
    )


class KitTools(ToolSet):
    """Tools for creating and saving kits."""

    def __init__(self, writer: Optional[ArtifactWriter] = None):
        self.writer = writer or ArtifactWriter()
        super().__init__()

    def create_definitions(self) -> List[ToolDefinition]:
        get_description = "Get the full Kit Definition text"
        create_description = (
            "Start the process of creating a new kit. Returns the kit definition and "
            "instructions for generating a kit from the user's description."
        )
        generate_description = (
            "Generate a kit file in the .bluekit/kits directory of the specified project path. "
            "Call this AFTER creating the kit content with YAML front matter."
        )
        return [
            ToolDefinition("bluekit.kit.getKitDefinition", get_description),
            ToolDefinition("bluekit.getKitDefinition", f"{get_description} (legacy name)"),
            ToolDefinition("bluekit.kit.createKit", create_description, _create_schema()),
            ToolDefinition("bluekit.createKit", f"{create_description} (legacy name)", _create_schema()),
            ToolDefinition("bluekit.kit.generateKit", generate_description, _generate_schema()),
            ToolDefinition("bluekit.generateKit", f"{generate_description} (legacy name)", _generate_schema()),
        ]

    def create_handlers(self) -> Dict[str, ToolHandler]:
        return {
            "bluekit.kit.getKitDefinition": self.get_definition,
            "bluekit.getKitDefinition": self.get_definition,
            "bluekit.kit.createKit": self.create_kit,
            "bluekit.createKit": self.create_kit,
            "bluekit.kit.generateKit": self.generate_kit,
            "bluekit.generateKit": self.generate_kit,
        }

    def get_definition(self, params: Dict[str, Any]) -> ToolResult:
        return text_result(load_prompt("get-kit-definition.md"))

    def create_kit(self, params: Dict[str, Any]) -> ToolResult:
        description = require_string(params, "description")
        body = "\n".join([
            "## Context for Kit Generation",
            "",
            "### Kit Definition",
            load_prompt("get-kit-definition.md"),
            "",
            "## Your Task",
            "",
            "Based on the user's description above, generate a complete kit that:",
            "",
            "1. **Extracts the essence** of what the user wants to containerize",
            "2. **Creates modular, reusable instructions** that can be injected into new apps",
            "3. **Follows the Kit Definition** structure (components, features, flows, or systems)",
            "4. **Is technology agnostic** and uses tokens for customization",
            "5. **Is complete and self-contained** with file paths, dependencies and setup instructions",
            "",
            KIT_FRONT_MATTER,
        ])
        return text_result(generation_instructions(
            "Kit",
            description,
            project_path_or_cwd(params),
            body,
            [
                "Generate the complete kit content with YAML front matter",
                "Use the `bluekit.kit.generateKit` tool with the projectPath to save it in the project's .bluekit directory",
            ],
        ))

    def generate_kit(self, params: Dict[str, Any]) -> ToolResult:
        path = self.writer.write(
            "kit",
            require_string(params, "name"),
            require_string(params, "content"),
            require_string(params, "projectPath"),
        )
        return text_result(f"✅ Generated kit: {path}")
