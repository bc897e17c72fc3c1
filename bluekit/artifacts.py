"""Artifact writer for kits, agents, walkthroughs and diagrams."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Tuple

from .bluekit_logging import log_artifact_event, log_operation
from .errors import StorageIOError, ValidationError
from .frontmatter import ensure_front_matter
from .paths import is_plain_segment, metadata_dir, normalize_path

logger = logging.getLogger("bluekit.artifacts")

# kind -> (sub-directory of .bluekit, file extension)
ARTIFACT_LOCATIONS: Dict[str, Tuple[str, str]] = {
    "kit": ("kits", ".md"),
    "agent": ("agents", ".md"),
    "diagram": ("diagrams", ".mmd"),
    "walkthrough": ("", ".md"),
}


def require_string(params: Dict[str, Any], key: str) -> str:
    """Return ``params[key]`` if it is a non-empty string."""

    value = params.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{key} is required and must be a string")
    return value


class ArtifactWriter:
    """Repair artifact headers and write them under a project's ``.bluekit``."""

    def target_path(self, kind: str, name: str, project_path: Path | str) -> Path:
        try:
            sub_dir, extension = ARTIFACT_LOCATIONS[kind]
        except KeyError:
            raise ValidationError(f"Unknown artifact kind: {kind}") from None
        if not is_plain_segment(name):
            raise ValidationError(f"name must be a plain file name, got {name!r}")
        base = metadata_dir(project_path)
        directory = base / sub_dir if sub_dir else base
        return directory / f"{name}{extension}"

    def prepare(self, kind: str, name: str, content: str) -> str:
        return ensure_front_matter(content, kind, name)

    def write(self, kind: str, name: str, content: str, project_path: Path | str) -> Path:
        """Repair ``content`` for ``kind`` and write it, overwriting any previous file."""

        if isinstance(project_path, Path):
            project_path = str(project_path)
        args = {"name": name, "content": content, "projectPath": project_path}
        for key in ("name", "content", "projectPath"):
            require_string(args, key)

        return self.write_prepared(kind, name, self.prepare(kind, name, content), project_path)

    def write_prepared(self, kind: str, name: str, content: str, project_path: Path | str) -> Path:
        """Write content whose header has already been repaired."""

        path = self.target_path(kind, name, project_path)
        with log_operation("write_artifact", kind=kind, name=name, project=str(normalize_path(project_path))):
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")
            except OSError as e:
                raise StorageIOError(f"Failed to write {kind} {path}: {e}") from e

        logger.info(f"Wrote {kind} artifact {path}")
        log_artifact_event("written", kind, name=name, path=str(path))
        return path
