"""Diagram tools: generation instructions and validated mermaid diagram writing."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..artifacts import ArtifactWriter
from ..errors import ValidationError
from ..frontmatter import metadata_warnings
from ..mermaid import MermaidValidatorClient, validate_diagram
from ..models import ToolDefinition
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

DIAGRAM_GUIDE = """## Your Task

Create a complete mermaid diagram based on the user's description. The diagram MUST include
YAML front matter with ALL required fields filled out:

- `alias`: Display name for the diagram (e.g. 'Backend Architecture')
- `description`: **REQUIRED** - what the diagram shows
- `tags`: **REQUIRED** - 1-5 descriptive tags

### Common Mermaid Syntax Issues to Avoid
- **@ symbol at the start of node labels**: use "modelcontextprotocol/sdk", not "@modelcontextprotocol/sdk"
- **Pipe characters in node labels**: use "/" or ","; pipes are only valid in edge labels (-->|label|)
- **Nested square brackets in node labels**: use plain text such as "item1, item2"
- **Parentheses in node labels**: they denote node shapes; remove them
- **Quotes in node labels**: remove them
- **Special characters at the start of labels**: avoid @ # $ % ^ & * \\ { } [ ] < >
- **Unclosed brackets** and **unmatched quotes**

### Example
```
---
alias: Simple API Flow
description: Basic flow of an API request through the system
tags:
  - api
  - flow
---

```mermaid
graph TB
    Client[Client Application] -->|HTTP Request| API[API Gateway]
    API -->|Route| Service[Backend Service]
    classDef clientGroup fill:#1e3a8a,stroke:#4287f5,stroke-width:2px
    class Client clientGroup
```
```"""


class DiagramTools(ToolSet):
    """Tools for creating and saving mermaid diagrams."""

    def __init__(self, writer: Optional[ArtifactWriter] = None, validator: Optional[MermaidValidatorClient] = None):
        self.writer = writer or ArtifactWriter()
        self.validator = validator if validator is not None else MermaidValidatorClient()
        super().__init__()

    def create_definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                "bluekit_diagram_createDiagram",
                "Start the process of creating a new mermaid diagram. Provides instructions for "
                "generating a diagram with all required metadata (alias, description, tags).",
                object_schema(
                    {
                        "description": string_property("User description of the diagram to create"),
                        "projectPath": string_property("Optional path to the project directory to analyze"),
                    },
                    ["description"],
                ),
            ),
            ToolDefinition(
                "bluekit_diagram_generateDiagram",
                "Validate and save a mermaid diagram in the .bluekit/diagrams directory of the project. "
                "Call this AFTER creating the diagram content with YAML front matter.",
                object_schema(
                    {
                        "name": string_property("Name of the diagram file (without extension, saved as .mmd)"),
                        "content": string_property("Mermaid code with YAML front matter"),
                        "projectPath": string_property("Path to the project directory"),
                    },
                    ["name", "content", "projectPath"],
                ),
            ),
        ]

    def create_handlers(self) -> Dict[str, ToolHandler]:
        return {
            "bluekit_diagram_createDiagram": self.create_diagram,
            "bluekit_diagram_generateDiagram": self.generate_diagram,
        }

    def create_diagram(self, params: Dict[str, Any]) -> ToolResult:
        description = require_string(params, "description")
        return text_result(generation_instructions(
            "Diagram",
            description,
            project_path_or_cwd(params),
            DIAGRAM_GUIDE,
            [
                "Generate the complete diagram content with proper YAML front matter",
                "Ensure tags and description are meaningful and filled out",
                "Use the `bluekit_diagram_generateDiagram` tool to save the diagram",
            ],
        ))

    async def generate_diagram(self, params: Dict[str, Any]) -> ToolResult:
        name = require_string(params, "name")
        content = require_string(params, "content")
        project_path = require_string(params, "projectPath")

        prepared = self.writer.prepare("diagram", name, content)
        result = await validate_diagram(prepared, self.validator)
        if result.fixed_content:
            prepared = result.fixed_content
        if not result.is_valid:
            raise ValidationError(
                "Mermaid syntax validation failed:\n\n"
                + "\n\n".join(result.errors)
                + "\n\nPlease fix these errors and try again."
            )

        path = self.writer.write_prepared("diagram", name, prepared, project_path)
        lines = [f"✅ Generated diagram: {path}", f"✓ Validated with {result.method} validator"]
        if result.auto_fixed:
            lines.append(
                f"🔧 Auto-fixed {result.auto_fixed} mermaid syntax issue(s) (@ symbols, pipes, brackets, etc.)."
            )
        return text_result("\n".join(lines) + format_warnings(metadata_warnings("diagram", prepared)))
