"""Data models for BlueKit registries, blueprints and tool dispatch.

This module contains the records persisted in the BlueKit registries and the
result types returned by the engines and the tool dispatcher.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class ProjectEntry:
    """One project known to the home-scoped project registry."""

    id: str
    title: str
    path: str
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "path": self.path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectEntry":
        """Create from dictionary representation."""
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            description=data.get("description") or "",
            path=data["path"],
        )


@dataclass(slots=True)
class UpsertResult:
    """Outcome of registering a project."""

    action: str
    entry: ProjectEntry
    total: int


@dataclass(slots=True)
class GlobalBlueprintRef:
    """Entry of the global blueprint registry."""

    id: str
    project_path: str
    created_at: str

    def to_dict(self) -> Dict[str, str]:
        return {"projectPath": self.project_path, "createdAt": self.created_at}


@dataclass(slots=True)
class Clone:
    """A registered snapshot of a git repository at a specific commit."""

    id: str
    name: str
    description: str
    git_url: str
    git_commit: str
    created_at: str
    git_branch: Optional[str] = None
    git_tag: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape stored in ``clones.json``."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "gitUrl": self.git_url,
            "gitCommit": self.git_commit,
        }
        if self.git_branch:
            data["gitBranch"] = self.git_branch
        if self.git_tag:
            data["gitTag"] = self.git_tag
        data["tags"] = list(self.tags)
        data["createdAt"] = self.created_at
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Clone":
        """Create from the JSON shape stored in ``clones.json``."""
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            git_url=data["gitUrl"],
            git_commit=data["gitCommit"],
            created_at=data.get("createdAt", ""),
            git_branch=data.get("gitBranch"),
            git_tag=data.get("gitTag"),
            tags=list(data.get("tags") or []),
            metadata=data.get("metadata"),
        )


@dataclass(slots=True)
class GitInfo:
    """Provenance of a working copy as reported by git."""

    url: str
    commit: str
    branch: Optional[str] = None
    tag: Optional[str] = None


@dataclass(slots=True)
class GenerationResult:
    """Files written by a blueprint generation."""

    blueprint_id: str
    folder: Path
    task_files: List[str]
    registered_globally: bool = False


@dataclass(slots=True)
class BlueprintSummary:
    """Listing entry for a blueprint."""

    id: str
    name: str
    version: Any
    description: str
    layer_count: int
    source: str
    project_path: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "layerCount": self.layer_count,
            "source": self.source,
            "projectPath": self.project_path,
        }


@dataclass(slots=True)
class BlueprintDocument:
    """Full metadata of a blueprint plus the markdown files in its folder."""

    metadata: Dict[str, Any]
    task_files: Dict[str, str]
    folder: Path
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata,
            "taskFiles": self.task_files,
            "folder": str(self.folder),
            "source": self.source,
        }


@dataclass(slots=True)
class ToolDefinition:
    """Catalog entry advertised to MCP clients."""

    name: str
    description: str
    input_schema: Dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(slots=True)
class BatchOutcome:
    """Result of one call inside a batch."""

    task: str
    success: bool
    result: Optional[List[Dict[str, Any]]] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"task": self.task, "success": self.success}
        if self.success:
            data["result"] = self.result
        else:
            data["error"] = self.error
        return data


@dataclass(slots=True)
class BatchReport:
    """Aggregated outcome of a sequential batch of tool calls."""

    outcomes: List[BatchOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.success)

    def render(self) -> str:
        """Human-readable summary followed by the per-call detail as JSON."""
        detail = json.dumps([outcome.to_dict() for outcome in self.outcomes], indent=2)
        return f"Batch: {self.succeeded} succeeded, {self.failed} failed\n\n{detail}"


@dataclass(slots=True)
class ValidationResult:
    """Verdict of a mermaid diagram validation."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    rendered_image: Optional[str] = None
    fixed_content: Optional[str] = None
    auto_fixed: int = 0
    method: str = "MCP"
