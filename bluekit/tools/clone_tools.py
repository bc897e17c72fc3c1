"""Clone tools: register git snapshots and create projects from them."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..clones import CloneRegistrar
from ..errors import ValidationError
from ..models import ToolDefinition
from .base import (
    ToolHandler,
    ToolResult,
    ToolSet,
    object_schema,
    optional_string,
    require_string,
    string_property,
    text_result,
)


class CloneTools(ToolSet):
    """Tools wrapping the clone registrar."""

    def __init__(self, registrar: Optional[CloneRegistrar] = None):
        self.registrar = registrar or CloneRegistrar()
        super().__init__()

    def create_definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                "bluekit_clone_register",
                "Register the current commit of a git project as a clone that new projects can be created from.",
                object_schema(
                    {
                        "projectPath": string_property("Path to the git project to register"),
                        "name": string_property("Human-readable clone name"),
                        "description": string_property("Optional description of the clone"),
                        "tags": {"type": "array", "items": {"type": "string"}, "description": "Optional tags"},
                    },
                    ["projectPath", "name"],
                ),
            ),
            ToolDefinition(
                "bluekit_clone_createProject",
                "Create a new project from a registered clone, checked out at the recorded commit, without git history.",
                object_schema(
                    {
                        "cloneId": string_property("ID of the clone to create the project from"),
                        "targetPath": string_property("Directory to create; must not exist"),
                    },
                    ["cloneId", "targetPath"],
                ),
            ),
        ]

    def create_handlers(self) -> Dict[str, ToolHandler]:
        return {
            "bluekit_clone_register": self.register_clone,
            "bluekit_clone_createProject": self.create_project,
        }

    def register_clone(self, params: Dict[str, Any]) -> ToolResult:
        tags = params.get("tags")
        if tags is not None and not isinstance(tags, list):
            raise ValidationError("tags must be an array of strings")

        clone = self.registrar.register(
            require_string(params, "projectPath"),
            require_string(params, "name"),
            optional_string(params, "description"),
            tags,
        )

        lines = [
            "✅ Clone registered!",
            "",
            f"Clone ID: {clone.id}",
            f"Name: {clone.name}",
            f"Description: {clone.description or '(none)'}",
            "",
            "📍 Git Information:",
            f"  Repository: {clone.git_url}",
            f"  Commit: {clone.git_commit}",
        ]
        if clone.git_branch:
            lines.append(f"  Branch: {clone.git_branch}")
        if clone.git_tag:
            lines.append(f"  Tag: {clone.git_tag}")
        if clone.tags:
            lines.extend(["", f"🏷️  Tags: {', '.join(clone.tags)}"])
        lines.extend([
            "",
            "Create new projects from it using:",
            f'  bluekit_clone_createProject({{ cloneId: "{clone.id}", targetPath: "/path/to/new/project" }})',
        ])
        return text_result("\n".join(lines))

    def create_project(self, params: Dict[str, Any]) -> ToolResult:
        clone_id = require_string(params, "cloneId")
        target = self.registrar.create_project(clone_id, require_string(params, "targetPath"))
        return text_result("\n".join([
            "🎉 Project created successfully!",
            "",
            f"📂 Location: {target}",
            f"Source clone: {clone_id}",
            "",
            "💡 You can now:",
            f"  1. cd {target}",
            "  2. git init (if you want version control)",
            "  3. Start customizing your project",
        ]))
