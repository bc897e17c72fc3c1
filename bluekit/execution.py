"""Execution briefing for a single blueprint task."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .blueprints import BLUEPRINT_FILE, BlueprintEngine
from .errors import NotFoundError, StorageIOError, ValidationError
from .paths import is_plain_segment

logger = logging.getLogger("bluekit.execution")

RULE = "─" * 57


@dataclass(slots=True)
class TaskLocation:
    """Where a task sits inside its blueprint."""

    task: Mapping[str, Any]
    layer: Mapping[str, Any]
    layer_position: int
    total_layers: int
    position_in_layer: int
    tasks_in_layer: int
    overall_position: int
    total_tasks: int


def locate_task(blueprint: Mapping[str, Any], task_file: str) -> Optional[TaskLocation]:
    """First task referencing ``task_file``, with its layer and counters.

    Layers are scanned in declared order; positions are 1-based.
    """

    layers: List[Mapping[str, Any]] = [
        layer for layer in blueprint.get("layers") or [] if isinstance(layer, Mapping)
    ]
    total_tasks = sum(len(layer.get("tasks") or []) for layer in layers)

    seen = 0
    for layer_index, layer in enumerate(layers, start=1):
        tasks = [task for task in layer.get("tasks") or [] if isinstance(task, Mapping)]
        for task_index, task in enumerate(tasks, start=1):
            seen += 1
            if task.get("taskFile") == task_file:
                return TaskLocation(
                    task=task,
                    layer=layer,
                    layer_position=layer_index,
                    total_layers=len(layers),
                    position_in_layer=task_index,
                    tasks_in_layer=len(tasks),
                    overall_position=seen,
                    total_tasks=total_tasks,
                )
    return None


class TaskContextBuilder:
    """Read a blueprint and one of its task files and format a briefing."""

    def __init__(self, engine: Optional[BlueprintEngine] = None):
        self.engine = engine or BlueprintEngine()

    def build(self, project_path: str, blueprint_id: str, task_file: str) -> str:
        for key, value in (("projectPath", project_path), ("blueprintId", blueprint_id), ("taskFile", task_file)):
            if not isinstance(value, str) or not value:
                raise ValidationError(f"{key} is required and must be a string")
        if not is_plain_segment(task_file):
            raise ValidationError(f"taskFile must be a plain file name, got {task_file!r}")

        folder, _ = self.engine.resolve_folder(blueprint_id, project_path)
        if not folder.is_dir():
            raise NotFoundError(f'Blueprint "{blueprint_id}" not found in project')
        metadata_path = folder / BLUEPRINT_FILE
        if not metadata_path.is_file():
            raise NotFoundError(f'blueprint.json not found for blueprint "{blueprint_id}"')
        task_path = folder / task_file
        if not task_path.is_file():
            raise NotFoundError(f'Task file "{task_file}" not found in blueprint "{blueprint_id}"')

        try:
            blueprint = json.loads(metadata_path.read_text(encoding="utf-8"))
            task_content = task_path.read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            raise StorageIOError(f"Failed to read blueprint {blueprint_id}: {e}") from e
        if not isinstance(blueprint, dict):
            raise StorageIOError(f"blueprint.json for {blueprint_id} must contain an object")

        location = locate_task(blueprint, task_file)
        if location is None:
            raise NotFoundError(f'Task "{task_file}" not found in blueprint metadata')

        logger.info(f"Built execution context for {blueprint_id}/{task_file}")
        return render_briefing(blueprint, location, task_file, task_content)


def render_briefing(blueprint: Dict[str, Any], location: TaskLocation, task_file: str, task_content: str) -> str:
    layer = location.layer
    task = location.task
    layer_count = len(blueprint.get("layers") or [])

    lines = [
        "🔷 BLUEPRINT TASK EXECUTION",
        "",
        f"Blueprint: {blueprint.get('name', '')} ({blueprint.get('id', '')})",
        f"Version: {blueprint.get('version', '')}",
        f"Description: {blueprint.get('description', '')}",
        "",
        "📍 TASK CONTEXT",
        "",
        f"Layer: {layer.get('order', location.layer_position)}/{location.total_layers} - {layer.get('name', '')}",
        f"Task: {location.position_in_layer}/{location.tasks_in_layer} in this layer",
        f"Overall: task {location.overall_position} of {location.total_tasks}",
        f"Task ID: {task.get('id', '')}",
        f"Description: {task.get('description', '')}",
        "",
        "📋 EXECUTION INSTRUCTIONS",
        "",
        "You are implementing a blueprint task. Your goal is to:",
        "1. Read and understand all steps in the task file below",
        "2. Implement each step sequentially and completely",
        "3. Run all verification commands to ensure success",
        "4. Report any errors immediately",
        "5. Only mark this task complete after all verification passes",
        "",
        "⚠️  IMPORTANT:",
        f"- This is part of a larger blueprint with {layer_count} layers",
        "- Do not skip steps or make assumptions",
        "- Follow the task instructions exactly as written",
        "- Verify your work before proceeding",
        "",
        RULE,
        "",
        f"📄 TASK FILE: {task_file}",
        "",
        task_content,
        "",
        RULE,
        "",
        "✅ COMPLETION CHECKLIST",
        "",
        "After implementing this task, ensure:",
        "- [ ] All steps have been completed",
        "- [ ] All verification commands pass",
        "- [ ] No errors or warnings",
        "- [ ] Ready to proceed to next task",
    ]
    return "\n".join(lines) + "\n"
