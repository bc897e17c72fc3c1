"""Task execution tool."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..execution import TaskContextBuilder
from ..models import ToolDefinition
from .base import ToolHandler, ToolResult, ToolSet, object_schema, require_string, string_property, text_result


class TaskTools(ToolSet):
    """Expose the execution briefing for one blueprint task."""

    def __init__(self, builder: Optional[TaskContextBuilder] = None):
        self.builder = builder or TaskContextBuilder()
        super().__init__()

    def create_definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                "bluekit_task_executeTask",
                "Execute a specific task from a blueprint. Retrieves the task file and blueprint "
                "metadata, providing full context for implementation.",
                object_schema(
                    {
                        "projectPath": string_property("Path to the project containing the blueprint"),
                        "blueprintId": string_property("ID of the blueprint (its folder name)"),
                        "taskFile": string_property("Task file name, e.g. setup-project.md"),
                    },
                    ["projectPath", "blueprintId", "taskFile"],
                ),
            )
        ]

    def create_handlers(self) -> Dict[str, ToolHandler]:
        return {"bluekit_task_executeTask": self.execute_task}

    def execute_task(self, params: Dict[str, Any]) -> ToolResult:
        return text_result(self.builder.build(
            require_string(params, "projectPath"),
            require_string(params, "blueprintId"),
            require_string(params, "taskFile"),
        ))
