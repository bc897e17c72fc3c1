"""Common tools: ping, batch execution and project initialization."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..errors import StorageIOError, ValidationError
from ..models import ToolDefinition
from ..paths import normalize_path, store_dir
from ..registry import ProjectRegistry
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

if TYPE_CHECKING:
    from ..dispatch import ToolDispatcher


class CommonTools(ToolSet):
    """Tools that are not tied to one artifact type.

    ``bluekit_batchExecute`` needs the dispatcher that owns this tool set;
    the dispatcher attaches itself when the tool set is registered.
    """

    def __init__(self, project_registry: Optional[ProjectRegistry] = None):
        self._project_registry = project_registry
        self.dispatcher: Optional["ToolDispatcher"] = None
        super().__init__()

    @property
    def project_registry(self) -> ProjectRegistry:
        if self._project_registry is None:
            self._project_registry = ProjectRegistry()
        return self._project_registry

    def create_definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition("bluekit_ping", "Health check for the BlueKit server"),
            ToolDefinition(
                "bluekit_batchExecute",
                "Execute several BlueKit tools sequentially. One failing call does not stop the others.",
                object_schema(
                    {
                        "tasks": {
                            "type": "array",
                            "description": "Tool calls to run in order",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "name": {"type": "string", "description": "Tool name"},
                                    "params": {"type": "object", "description": "Tool arguments"},
                                },
                                "required": ["name", "params"],
                            },
                        }
                    },
                    ["tasks"],
                ),
            ),
            ToolDefinition(
                "bluekit.init_project",
                "Link a project to the BlueKit store by adding it to ~/.bluekit/projectRegistry.json",
                object_schema(
                    {
                        "projectPath": string_property("Path to the project directory"),
                        "title": string_property("Optional project title; defaults to the directory name"),
                        "description": string_property("Optional project description"),
                        "confirm": {
                            "type": "boolean",
                            "description": "Required when ~/.bluekit does not exist yet",
                        },
                    },
                    ["projectPath"],
                ),
            ),
        ]

    def create_handlers(self) -> Dict[str, ToolHandler]:
        return {
            "bluekit_ping": self.ping,
            "bluekit_batchExecute": self.batch_execute,
            "bluekit.init_project": self.init_project,
        }

    def ping(self, params: Dict[str, Any]) -> ToolResult:
        return text_result("pong from BlueKit!")

    async def batch_execute(self, params: Dict[str, Any]) -> ToolResult:
        tasks = params.get("tasks")
        if not isinstance(tasks, list) or not tasks:
            raise ValidationError("tasks is required and must be a non-empty array")
        if self.dispatcher is None:
            raise RuntimeError("CommonTools is not attached to a dispatcher")

        report = await self.dispatcher.batch_execute(tasks)
        return text_result(f"✅ {report.render()}")

    def init_project(self, params: Dict[str, Any]) -> ToolResult:
        project_path = require_string(params, "projectPath")
        title = optional_string(params, "title") or None
        description = params.get("description")
        if description is not None and not isinstance(description, str):
            raise ValidationError("description must be a string")

        store = store_dir()
        if not store.exists():
            if not optional_bool(params, "confirm"):
                return text_result(
                    "⚠️  The BlueKit store directory (~/.bluekit) does not exist.\n\n"
                    "Creating this directory will link the current project to your BlueKit store.\n"
                    "This allows the BlueKit desktop app to discover and manage your projects.\n\n"
                    f"Project path: {project_path}\n\n"
                    "To proceed, run the command again with confirm: true."
                )
            try:
                store.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageIOError(f"Failed to create {store}: {e}") from e

        result = self.project_registry.upsert(project_path, title=title, description=description)
        return text_result(
            f"✅ Project {result.action} to BlueKit store!\n\n"
            f"Registry location: {self.project_registry.path}\n"
            f"Project path: {normalize_path(project_path)}\n"
            f"Total projects in registry: {result.total}"
        )
