"""Path resolution and naming helpers shared by the BlueKit stores."""

from __future__ import annotations

import os
import re
from pathlib import Path

METADATA_DIR_NAME = ".bluekit"
PROJECT_REGISTRY_FILE = "projectRegistry.json"
BLUEPRINT_REGISTRY_FILE = "blueprintRegistry.json"
CLONES_FILE = "clones.json"

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
_ALIAS_SPLIT_PATTERN = re.compile(r"[-_\s]+")


def home_dir() -> Path:
    """Return the user home directory, honouring HOME then USERPROFILE."""

    home = os.getenv("HOME") or os.getenv("USERPROFILE") or "~"
    return Path(home).expanduser()


def store_dir() -> Path:
    """Return the home-scoped BlueKit store (``~/.bluekit``)."""

    return home_dir() / METADATA_DIR_NAME


def git_sources_dir() -> Path:
    return store_dir() / "tmp" / "git-sources"


def normalize_path(path: Path | str) -> Path:
    """Absolute, normalized form of ``path`` used as a registry key.

    ``~`` is expanded and relative paths are resolved against the current
    working directory. Symlinks are left alone so the key matches what the
    caller typed.
    """

    return Path(os.path.abspath(os.path.expanduser(str(path))))


def metadata_dir(project_path: Path | str) -> Path:
    return normalize_path(project_path) / METADATA_DIR_NAME


def slugify(value: str) -> str:
    return _SLUG_PATTERN.sub("-", value.lower()).strip("-")


def format_alias(value: str) -> str:
    """Title-case display name: ``my-cool_kit`` becomes ``My Cool Kit``."""

    words = [word for word in _ALIAS_SPLIT_PATTERN.split(value) if word]
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def is_plain_segment(value: str) -> bool:
    """True when ``value`` can be used as a single path segment."""

    if not value or value in {".", ".."}:
        return False
    return "/" not in value and "\\" not in value and "\x00" not in value
