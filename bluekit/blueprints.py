"""Blueprint engine: validate, persist, list and retrieve layered plans.

A blueprint lives in ``.bluekit/blueprints/{id}/`` as ``blueprint.json``
plus one markdown file per distinct task file its layers reference.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .bluekit_logging import log_performance, observability_hooks
from .errors import MissingTaskContentError, NotFoundError, StorageIOError, ValidationError
from .frontmatter import ensure_task_header
from .models import BlueprintDocument, BlueprintSummary, GenerationResult
from .paths import is_plain_segment, metadata_dir, normalize_path
from .registry import BlueprintRegistry, utc_now_iso

logger = logging.getLogger("bluekit.blueprints")

BLUEPRINT_FILE = "blueprint.json"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require(container: Mapping[str, Any], key: str, label: str, check, expected: str) -> Any:
    value = container.get(key)
    if not check(value):
        raise ValidationError(f"{label} is required and must be {expected}")
    return value


def _string(value: Any) -> bool:
    return isinstance(value, str)


def _list(value: Any) -> bool:
    return isinstance(value, list)


def validate_blueprint(blueprint: Any, task_contents: Any) -> List[str]:
    """Check ``blueprint`` and return its distinct task files in first-use order.

    Raises ``ValidationError`` naming the first offending field, or
    ``MissingTaskContentError`` for a task file with no supplied content.
    """

    if not isinstance(blueprint, Mapping):
        raise ValidationError("blueprint is required and must be an object")
    if not isinstance(task_contents, Mapping) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in task_contents.items()
    ):
        raise ValidationError("taskContents is required and must be an object of file name to content")

    blueprint_id = _require(blueprint, "id", "blueprint.id", _string, "a string")
    if not is_plain_segment(blueprint_id):
        raise ValidationError(f"blueprint.id must be usable as a folder name, got {blueprint_id!r}")
    _require(blueprint, "name", "blueprint.name", _string, "a string")
    _require(blueprint, "version", "blueprint.version", _is_number, "a number")
    _require(blueprint, "description", "blueprint.description", _string, "a string")
    layers = _require(blueprint, "layers", "blueprint.layers", _list, "an array")

    for layer_index, layer in enumerate(layers):
        label = f"blueprint.layers[{layer_index}]"
        if not isinstance(layer, Mapping):
            raise ValidationError(f"{label} must be an object")
        _require(layer, "id", f"{label}.id", _string, "a string")
        _require(layer, "order", f"{label}.order", _is_number, "a number")
        _require(layer, "name", f"{label}.name", _string, "a string")
        tasks = _require(layer, "tasks", f"{label}.tasks", _list, "an array")

        for task_index, task in enumerate(tasks):
            task_label = f"{label}.tasks[{task_index}]"
            if not isinstance(task, Mapping):
                raise ValidationError(f"{task_label} must be an object")
            _require(task, "id", f"{task_label}.id", _string, "a string")
            task_file = _require(task, "taskFile", f"{task_label}.taskFile", _string, "a string")
            if not is_plain_segment(task_file):
                raise ValidationError(f"{task_label}.taskFile must be a plain file name, got {task_file!r}")
            if task_file == BLUEPRINT_FILE:
                raise ValidationError(f"{task_label}.taskFile must not be {BLUEPRINT_FILE}")
            _require(task, "description", f"{task_label}.description", _string, "a string")

    task_files: List[str] = []
    for layer in layers:
        for task in layer["tasks"]:
            if task["taskFile"] not in task_files:
                task_files.append(task["taskFile"])

    for task_file in task_files:
        if task_file not in task_contents:
            raise MissingTaskContentError(task_file)

    return task_files


def _task_descriptions(blueprint: Mapping[str, Any]) -> Dict[str, str]:
    descriptions: Dict[str, str] = {}
    for layer in blueprint["layers"]:
        for task in layer["tasks"]:
            descriptions.setdefault(task["taskFile"], task["description"])
    return descriptions


class BlueprintEngine:
    """Create and read blueprints in projects and the global registry."""

    def __init__(self, global_registry: Optional[BlueprintRegistry] = None):
        self._global_registry = global_registry

    @property
    def global_registry(self) -> BlueprintRegistry:
        # Built lazily so HOME is read when the registry is first needed.
        if self._global_registry is None:
            self._global_registry = BlueprintRegistry()
        return self._global_registry

    @staticmethod
    def blueprints_dir(project_path: Path | str) -> Path:
        return metadata_dir(project_path) / "blueprints"

    @log_performance("generate_blueprint")
    def generate(
        self,
        project_path: Any,
        blueprint: Any,
        task_contents: Any,
        save_to_global: bool = False,
    ) -> GenerationResult:
        """Validate the whole blueprint, then write its folder.

        Nothing touches the filesystem until validation has passed. The write
        phase is not transactional: a failure part way leaves the files
        written so far in place.
        """

        if not isinstance(project_path, str) or not project_path:
            raise ValidationError("projectPath is required and must be a string")
        task_files = validate_blueprint(blueprint, task_contents)

        document = dict(blueprint)
        if not document.get("createdAt"):
            document["createdAt"] = utc_now_iso()

        folder = self.blueprints_dir(project_path) / document["id"]
        descriptions = _task_descriptions(document)
        try:
            folder.mkdir(parents=True, exist_ok=True)
            (folder / BLUEPRINT_FILE).write_text(json.dumps(document, indent=2), encoding="utf-8")
            for task_file in task_files:
                content = ensure_task_header(task_contents[task_file], task_file, descriptions[task_file])
                (folder / task_file).write_text(content, encoding="utf-8")
        except OSError as e:
            raise StorageIOError(f"Failed to write blueprint {document['id']}: {e}") from e

        unused = sorted(set(task_contents) - set(task_files))
        if unused:
            logger.warning(f"Ignoring task contents no task references: {', '.join(unused)}")

        if save_to_global:
            self.global_registry.put(document["id"], project_path, document["createdAt"])

        observability_hooks.log_event(
            "blueprint_generated",
            blueprint_id=document["id"],
            folder=str(folder),
            task_count=len(task_files),
            registered_globally=bool(save_to_global),
        )
        return GenerationResult(
            blueprint_id=document["id"],
            folder=folder,
            task_files=task_files,
            registered_globally=bool(save_to_global),
        )

    @staticmethod
    def _read_metadata(path: Path) -> Dict[str, Any]:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("blueprint.json must contain an object")
        return data

    @staticmethod
    def _summary(data: Dict[str, Any], folder: Path, source: str, project_path: Path | str) -> BlueprintSummary:
        layers = data.get("layers")
        return BlueprintSummary(
            id=str(data.get("id", folder.name)),
            name=str(data.get("name", "")),
            version=data.get("version"),
            description=str(data.get("description", "")),
            layer_count=len(layers) if isinstance(layers, list) else 0,
            source=source,
            project_path=str(project_path),
        )

    def list(self, project_path: Optional[Path | str] = None, include_global: bool = False) -> List[BlueprintSummary]:
        """Summaries of local blueprints, then global ones not already listed."""

        summaries: List[BlueprintSummary] = []
        if project_path is not None:
            root = normalize_path(project_path)
            blueprints_dir = self.blueprints_dir(root)
            if blueprints_dir.is_dir():
                for folder in sorted(p for p in blueprints_dir.iterdir() if p.is_dir()):
                    path = folder / BLUEPRINT_FILE
                    if not path.is_file():
                        continue
                    try:
                        data = self._read_metadata(path)
                    except (OSError, ValueError) as e:
                        logger.warning(f"Skipping unreadable blueprint {path}: {e}")
                        continue
                    summaries.append(self._summary(data, folder, "local", root))

        if include_global or project_path is None:
            seen = {summary.id for summary in summaries}
            for blueprint_id, ref in self.global_registry.entries().items():
                if blueprint_id in seen:
                    continue
                folder = self.blueprints_dir(ref.project_path) / blueprint_id
                try:
                    data = self._read_metadata(folder / BLUEPRINT_FILE)
                except (OSError, ValueError) as e:
                    logger.warning(f"Skipping unresolvable global blueprint {blueprint_id}: {e}")
                    continue
                summaries.append(self._summary(data, folder, "global", ref.project_path))
                seen.add(blueprint_id)

        return summaries

    def resolve_folder(self, blueprint_id: str, project_path: Optional[Path | str] = None, from_global: bool = False) -> tuple[Path, str]:
        if not isinstance(blueprint_id, str) or not is_plain_segment(blueprint_id):
            raise ValidationError("id is required and must be a string")

        if from_global or project_path is None:
            ref = self.global_registry.get(blueprint_id)
            if ref is None:
                raise NotFoundError(f'Blueprint "{blueprint_id}" not found in global registry')
            return self.blueprints_dir(ref.project_path) / blueprint_id, "global"
        return self.blueprints_dir(project_path) / blueprint_id, "local"

    def get(self, blueprint_id: str, project_path: Optional[Path | str] = None, from_global: bool = False) -> BlueprintDocument:
        """Full metadata plus every markdown file in the blueprint folder."""

        folder, source = self.resolve_folder(blueprint_id, project_path, from_global)
        if not folder.is_dir():
            raise NotFoundError(f'Blueprint "{blueprint_id}" not found in project')
        path = folder / BLUEPRINT_FILE
        if not path.is_file():
            raise NotFoundError(f'blueprint.json not found for blueprint "{blueprint_id}"')

        try:
            metadata = self._read_metadata(path)
            task_files = {
                file.name: file.read_text(encoding="utf-8")
                for file in sorted(folder.glob("*.md"))
                if file.is_file()
            }
        except (OSError, ValueError) as e:
            raise StorageIOError(f"Failed to read blueprint {blueprint_id}: {e}") from e

        return BlueprintDocument(metadata=metadata, task_files=task_files, folder=folder, source=source)
