"""JSON-backed registries: known projects, global blueprints, per-project clones.

Every store reads its file on each operation and rewrites the whole file on
change. A missing or malformed file reads as an empty collection; there is no
locking, so two writers interleaving load and save lose one update.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from .bluekit_logging import observability_hooks
from .errors import PreconditionError, StorageIOError
from .models import Clone, GlobalBlueprintRef, ProjectEntry, UpsertResult
from .paths import (
    BLUEPRINT_REGISTRY_FILE,
    CLONES_FILE,
    PROJECT_REGISTRY_FILE,
    metadata_dir,
    normalize_path,
    store_dir,
)

logger = logging.getLogger("bluekit.registry")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class RegistryBackend(Protocol):
    """Load/save boundary the registries persist through."""

    def load(self) -> Any:
        ...

    def save(self, data: Any) -> None:
        ...


class JsonFileBackend:
    """Whole-file JSON persistence with read-or-empty semantics."""

    def __init__(self, path: Path | str, shape: type = list):
        self.path = Path(path)
        self.shape = shape

    def load(self) -> Any:
        if not self.path.exists():
            return self.shape()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Treating unreadable registry {self.path} as empty: {e}")
            return self.shape()
        if not isinstance(data, self.shape):
            logger.warning(
                f"Treating registry {self.path} as empty: expected a JSON "
                f"{'array' if self.shape is list else 'object'}, found {type(data).__name__}"
            )
            return self.shape()
        return data

    def save(self, data: Any) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageIOError(f"Failed to write {self.path}: {e}") from e


def _entry_path(item: Any) -> Optional[Path]:
    if isinstance(item, dict) and isinstance(item.get("path"), str) and item["path"]:
        return normalize_path(item["path"])
    return None


class ProjectRegistry:
    """Home-scoped list of projects linked to the BlueKit store."""

    def __init__(self, backend: Optional[RegistryBackend] = None):
        self.backend = backend or JsonFileBackend(store_dir() / PROJECT_REGISTRY_FILE, list)

    @property
    def path(self) -> Optional[Path]:
        return getattr(self.backend, "path", None)

    def entries(self) -> List[ProjectEntry]:
        """Every well-formed entry, in registry order."""
        return [ProjectEntry.from_dict(item) for item in self.backend.load() if _entry_path(item)]

    def existing_projects(self) -> List[ProjectEntry]:
        """Entries whose project directory still exists."""
        return [entry for entry in self.entries() if Path(entry.path).is_dir()]

    def find(self, path: Path | str) -> Optional[ProjectEntry]:
        normalized = normalize_path(path)
        for item in self.backend.load():
            if _entry_path(item) == normalized:
                return ProjectEntry.from_dict(item)
        return None

    def contains(self, path: Path | str) -> bool:
        return self.find(path) is not None

    def upsert(
        self,
        path: Path | str,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> UpsertResult:
        """Add the project or update the entry with the same normalized path."""

        normalized = normalize_path(path)
        items = self.backend.load()

        index = next((i for i, item in enumerate(items) if _entry_path(item) == normalized), None)
        if index is None:
            entry = ProjectEntry(
                id=str(int(time.time() * 1000)),
                title=title or normalized.name,
                description=description or "",
                path=str(normalized),
            )
            items.append(entry.to_dict())
            action = "added"
        else:
            existing = ProjectEntry.from_dict(items[index])
            entry = ProjectEntry(
                id=existing.id or str(int(time.time() * 1000)),
                title=title or existing.title or normalized.name,
                description=description if description is not None else existing.description,
                path=str(normalized),
            )
            items[index] = {**items[index], **entry.to_dict()}
            action = "updated"

        self.backend.save(items)
        logger.info(f"Project {action} in registry: {normalized}")
        observability_hooks.log_event("project_registered", action=action, path=str(normalized))
        return UpsertResult(action=action, entry=entry, total=len(items))


class BlueprintRegistry:
    """Home-scoped map of blueprint id to the project that holds it."""

    def __init__(self, backend: Optional[RegistryBackend] = None):
        self.backend = backend or JsonFileBackend(store_dir() / BLUEPRINT_REGISTRY_FILE, dict)

    def entries(self) -> Dict[str, GlobalBlueprintRef]:
        refs: Dict[str, GlobalBlueprintRef] = {}
        for blueprint_id, value in self.backend.load().items():
            if not isinstance(value, dict) or not isinstance(value.get("projectPath"), str):
                logger.warning(f"Skipping malformed blueprint registry entry: {blueprint_id}")
                continue
            refs[blueprint_id] = GlobalBlueprintRef(
                id=blueprint_id,
                project_path=value["projectPath"],
                created_at=str(value.get("createdAt", "")),
            )
        return refs

    def get(self, blueprint_id: str) -> Optional[GlobalBlueprintRef]:
        return self.entries().get(blueprint_id)

    def put(self, blueprint_id: str, project_path: Path | str, created_at: Optional[str] = None) -> GlobalBlueprintRef:
        ref = GlobalBlueprintRef(
            id=blueprint_id,
            project_path=str(normalize_path(project_path)),
            created_at=created_at or utc_now_iso(),
        )
        data = self.backend.load()
        data[blueprint_id] = ref.to_dict()
        self.backend.save(data)
        logger.info(f"Registered blueprint {blueprint_id} globally")
        return ref


class CloneStore:
    """The ``clones.json`` file of one project."""

    def __init__(self, project_path: Path | str, backend: Optional[RegistryBackend] = None):
        self.project_path = normalize_path(project_path)
        self.backend = backend or JsonFileBackend(metadata_dir(self.project_path) / CLONES_FILE, list)

    def clones(self) -> List[Clone]:
        clones: List[Clone] = []
        for item in self.backend.load():
            try:
                clones.append(Clone.from_dict(item))
            except (KeyError, TypeError, AttributeError):
                logger.warning(f"Skipping malformed clone entry in {self.project_path}")
        return clones

    def find(self, clone_id: str) -> Optional[Clone]:
        return next((clone for clone in self.clones() if clone.id == clone_id), None)

    def upsert(self, clone: Clone) -> str:
        """Insert ``clone`` or replace the entry with the same id."""

        items = self.backend.load()
        index = next(
            (i for i, item in enumerate(items) if isinstance(item, dict) and item.get("id") == clone.id),
            None,
        )
        if index is None:
            items.append(clone.to_dict())
            action = "added"
        else:
            items[index] = clone.to_dict()
            action = "updated"
        self.backend.save(items)
        return action

    def add(self, clone: Clone, project_registry: ProjectRegistry) -> str:
        """Upsert ``clone`` after checking the project is registered."""

        if not project_registry.contains(self.project_path):
            raise PreconditionError(
                f"Project not found in registry: {self.project_path}. "
                "Please run bluekit_init_project first."
            )
        action = self.upsert(clone)
        logger.info(f"Clone {clone.id} {action} in {self.project_path}")
        return action


def find_clone_across_projects(clone_id: str, project_registry: ProjectRegistry) -> Optional[Clone]:
    """First clone with ``clone_id`` among registered projects that still exist."""

    for entry in project_registry.existing_projects():
        clone = CloneStore(entry.path).find(clone_id)
        if clone is not None:
            return clone
    return None
