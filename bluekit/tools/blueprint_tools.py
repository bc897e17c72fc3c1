"""Blueprint tools backed by the blueprint engine."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from ..blueprints import BlueprintEngine
from ..models import ToolDefinition
from ..prompts import load_prompt
from .base import (
    ToolHandler,
    ToolResult,
    ToolSet,
    object_schema,
    optional_bool,
    optional_string,
    require_string,
    string_property,
    text_result,
)


class BlueprintTools(ToolSet):
    """Tools for generating, listing and reading blueprints."""

    def __init__(self, engine: Optional[BlueprintEngine] = None):
        self.engine = engine or BlueprintEngine()
        super().__init__()

    def create_definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition("bluekit.blueprint.getBlueprintDefinition", "Get the full Blueprint Definition text"),
            ToolDefinition(
                "bluekit.blueprint.generateBlueprint",
                "Save a blueprint and its task files in .bluekit/blueprints/{id} of the project. "
                "Every task's taskFile must have content in taskContents.",
                object_schema(
                    {
                        "projectPath": string_property("Path to the project directory"),
                        "blueprint": {
                            "type": "object",
                            "description": "Blueprint with id, name, version, description and layers "
                                           "(each layer has id, order, name and tasks of id, taskFile, description)",
                        },
                        "taskContents": {
                            "type": "object",
                            "description": "Map of task file name to markdown content",
                            "additionalProperties": {"type": "string"},
                        },
                        "saveToGlobal": {
                            "type": "boolean",
                            "description": "Also register the blueprint in ~/.bluekit/blueprintRegistry.json",
                        },
                    },
                    ["projectPath", "blueprint", "taskContents"],
                ),
            ),
            ToolDefinition(
                "bluekit.blueprint.listBlueprints",
                "List blueprints of a project and, optionally or when no project is given, the global registry",
                object_schema(
                    {
                        "projectPath": string_property("Optional project directory"),
                        "includeGlobal": {"type": "boolean", "description": "Include globally registered blueprints"},
                    }
                ),
            ),
            ToolDefinition(
                "bluekit.blueprint.getBlueprint",
                "Get a blueprint's metadata and task files by ID",
                object_schema(
                    {
                        "id": string_property("ID of the blueprint to retrieve"),
                        "projectPath": string_property("Project holding the blueprint; omit to use the global registry"),
                        "fromGlobal": {"type": "boolean", "description": "Resolve through the global registry"},
                    },
                    ["id"],
                ),
            ),
        ]

    def create_handlers(self) -> Dict[str, ToolHandler]:
        return {
            "bluekit.blueprint.getBlueprintDefinition": self.get_definition,
            "bluekit.blueprint.generateBlueprint": self.generate_blueprint,
            "bluekit.blueprint.listBlueprints": self.list_blueprints,
            "bluekit.blueprint.getBlueprint": self.get_blueprint,
        }

    def get_definition(self, params: Dict[str, Any]) -> ToolResult:
        return text_result(load_prompt("get-blueprint-definition.md"))

    def generate_blueprint(self, params: Dict[str, Any]) -> ToolResult:
        result = self.engine.generate(
            params.get("projectPath"),
            params.get("blueprint"),
            params.get("taskContents"),
            save_to_global=optional_bool(params, "saveToGlobal"),
        )
        lines = [
            "✅ Blueprint generated!",
            "",
            f"Blueprint ID: {result.blueprint_id}",
            f"Folder: {result.folder}",
            f"Task files written: {len(result.task_files)}",
        ]
        lines.extend(f"  - {task_file}" for task_file in result.task_files)
        if result.registered_globally:
            lines.append("Registered in the global blueprint registry")
        return text_result("\n".join(lines))

    def list_blueprints(self, params: Dict[str, Any]) -> ToolResult:
        project_path = optional_string(params, "projectPath") or None
        summaries = self.engine.list(project_path, include_global=optional_bool(params, "includeGlobal"))
        if not summaries:
            return text_result("No blueprints found.")

        entries = "\n\n".join(
            f"- {summary.name} (ID: {summary.id}, Version: {summary.version}, "
            f"Layers: {summary.layer_count}, Source: {summary.source})\n  {summary.description}"
            for summary in summaries
        )
        return text_result(f"Found {len(summaries)} blueprint(s):\n\n{entries}")

    def get_blueprint(self, params: Dict[str, Any]) -> ToolResult:
        document = self.engine.get(
            require_string(params, "id"),
            optional_string(params, "projectPath") or None,
            from_global=optional_bool(params, "fromGlobal"),
        )
        return text_result(json.dumps(document.to_dict(), indent=2))
