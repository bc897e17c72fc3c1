"""Thin wrapper over the git command line."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import GitCommandError, StorageIOError
from .models import GitInfo

logger = logging.getLogger("bluekit.git")


class GitClient:
    """Run git subprocesses in a working directory."""

    def __init__(self, executable: str = "git", timeout: Optional[float] = 300):
        self.executable = executable
        self.timeout = timeout

    def run(self, args: Sequence[str], cwd: Optional[Path | str] = None) -> str:
        """Run ``git <args>`` and return stripped stdout.

        Non-zero exits raise ``GitCommandError`` with git's stderr.
        """

        command: List[str] = [self.executable, *args]
        logger.debug(f"Running {' '.join(command)} in {cwd or '.'}")
        try:
            result = subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise StorageIOError(f"git executable not found: {self.executable}") from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(args, -1, f"timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise GitCommandError(args, result.returncode, result.stderr)
        return result.stdout.strip()

    def try_run(self, args: Sequence[str], cwd: Optional[Path | str] = None) -> Optional[str]:
        """Like ``run`` but a git failure yields ``None``."""

        try:
            return self.run(args, cwd)
        except GitCommandError:
            return None

    def remote_url(self, repo: Path | str) -> str:
        return self.run(["config", "--get", "remote.origin.url"], cwd=repo)

    def head_commit(self, repo: Path | str) -> str:
        return self.run(["rev-parse", "HEAD"], cwd=repo)

    def current_branch(self, repo: Path | str) -> Optional[str]:
        """Branch name, or ``None`` on a detached HEAD."""

        branch = self.try_run(["rev-parse", "--abbrev-ref", "HEAD"], cwd=repo)
        if not branch or branch == "HEAD":
            return None
        return branch

    def exact_tag(self, repo: Path | str) -> Optional[str]:
        """Tag pointing exactly at HEAD, if any."""

        return self.try_run(["describe", "--exact-match", "--tags", "HEAD"], cwd=repo) or None

    def info(self, repo: Path | str) -> GitInfo:
        return GitInfo(
            url=self.remote_url(repo),
            commit=self.head_commit(repo),
            branch=self.current_branch(repo),
            tag=self.exact_tag(repo),
        )

    def clone(self, url: str, destination: Path | str) -> None:
        self.run(["clone", url, str(destination)])

    def checkout(self, repo: Path | str, commit: str) -> None:
        self.run(["-C", str(repo), "checkout", commit])
