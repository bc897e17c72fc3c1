"""Clone registrar: capture git provenance and materialize projects from it."""

from __future__ import annotations

import logging
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .bluekit_logging import log_operation, observability_hooks
from .errors import AlreadyExistsError, NotFoundError, NotVersionControlledError, StorageIOError, ValidationError
from .git import GitClient
from .models import Clone
from .paths import git_sources_dir, normalize_path, slugify
from .registry import CloneStore, ProjectRegistry, find_clone_across_projects, utc_now_iso

logger = logging.getLogger("bluekit.clones")


def clone_id_for(name: str, when: Optional[datetime] = None) -> str:
    """``slug(name)-YYYYMMDD`` using the UTC date."""

    when = when or datetime.now(timezone.utc)
    return f"{slugify(name)}-{when.strftime('%Y%m%d')}"


class CloneRegistrar:
    """Register clones of git projects and create new projects from them."""

    def __init__(self, git: Optional[GitClient] = None, project_registry: Optional[ProjectRegistry] = None):
        self.git = git or GitClient()
        self._project_registry = project_registry

    @property
    def project_registry(self) -> ProjectRegistry:
        if self._project_registry is None:
            self._project_registry = ProjectRegistry()
        return self._project_registry

    def register(
        self,
        project_path: str,
        name: str,
        description: str = "",
        tags: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Clone:
        """Snapshot the project's current commit as a clone entry."""

        if not isinstance(project_path, str) or not project_path:
            raise ValidationError("projectPath is required and must be a string")
        if not isinstance(name, str) or not name:
            raise ValidationError("name is required and must be a string")
        if tags is not None and (not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags)):
            raise ValidationError("tags must be an array of strings")

        root = normalize_path(project_path)
        if not root.exists():
            raise NotFoundError(f"Project path does not exist: {root}")
        if not (root / ".git").exists():
            raise NotVersionControlledError(f"Not a git repository: {root}")

        with log_operation("register_clone", project=str(root), name=name):
            info = self.git.info(root)
            clone = Clone(
                id=clone_id_for(name),
                name=name,
                description=description or "",
                git_url=info.url,
                git_commit=info.commit,
                git_branch=info.branch,
                git_tag=info.tag,
                tags=list(tags or []),
                created_at=utc_now_iso(),
                metadata=metadata,
            )
            CloneStore(root).add(clone, self.project_registry)

        observability_hooks.log_event("clone_registered", clone_id=clone.id, project=str(root))
        return clone

    def create_project(self, clone_id: str, target_path: str) -> Path:
        """Clone the source repository at the recorded commit into ``target_path``.

        The copy excludes ``.git`` so the new project starts without history.
        The scratch checkout is removed on every exit path.
        """

        if not isinstance(clone_id, str) or not clone_id:
            raise ValidationError("cloneId is required and must be a string")
        if not isinstance(target_path, str) or not target_path:
            raise ValidationError("targetPath is required and must be a string")

        target = normalize_path(target_path)
        if target.exists():
            raise AlreadyExistsError(f"Target path already exists: {target}")

        clone = find_clone_across_projects(clone_id, self.project_registry)
        if clone is None:
            raise NotFoundError(f"Clone not found: {clone_id}")

        scratch_root = git_sources_dir()
        try:
            scratch_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Failed to create {scratch_root}: {e}") from e

        with log_operation("create_project_from_clone", clone_id=clone_id, target=str(target)):
            with tempfile.TemporaryDirectory(prefix="clone-", dir=scratch_root) as scratch:
                checkout = Path(scratch) / "source"
                self.git.clone(clone.git_url, checkout)
                self.git.checkout(checkout, clone.git_commit)
                try:
                    shutil.copytree(checkout, target, ignore=shutil.ignore_patterns(".git"))
                except OSError as e:
                    raise StorageIOError(f"Failed to copy files to {target}: {e}") from e

        logger.info(f"Created project {target} from clone {clone_id}")
        return target
