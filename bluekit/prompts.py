"""Packaged prompt documents and their ``bluekit://prompts/`` resources."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .errors import NotFoundError, ValidationError

PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"
RESOURCE_PREFIX = "bluekit://prompts/"


@dataclass(slots=True)
class PromptResource:
    uri: str
    name: str
    description: str
    mime_type: str = "text/markdown"


def load_prompt(relative_path: str, prompts_dir: Optional[Path] = None) -> str:
    base = prompts_dir or PROMPTS_DIR
    path = base / relative_path
    if not path.is_file():
        raise NotFoundError(f"Prompt not found: {relative_path}")
    return path.read_text(encoding="utf-8")


def _display_name(file_name: str) -> str:
    stem = file_name[:-3] if file_name.endswith(".md") else file_name
    return " ".join(word[:1].upper() + word[1:] for word in stem.split("-"))


def list_prompt_resources(prompts_dir: Optional[Path] = None) -> List[PromptResource]:
    """One resource per markdown file in the prompts directory."""

    base = prompts_dir or PROMPTS_DIR
    if not base.is_dir():
        return []

    resources = []
    for path in sorted(base.iterdir()):
        if path.is_file() and path.name.endswith(".md"):
            name = _display_name(path.name)
            resources.append(
                PromptResource(
                    uri=f"{RESOURCE_PREFIX}{path.name}",
                    name=name,
                    description=f"BlueKit {name} reference documentation",
                )
            )
    return resources


def resolve_prompt_uri(uri: str, prompts_dir: Optional[Path] = None) -> Path:
    """Map a resource URI to a file inside the prompts directory.

    Paths that escape the directory are rejected.
    """

    if not uri.startswith(RESOURCE_PREFIX):
        raise ValidationError(f"Unknown resource URI: {uri}")

    base = (prompts_dir or PROMPTS_DIR).resolve()
    path = (base / uri[len(RESOURCE_PREFIX):]).resolve()
    if path != base and base not in path.parents:
        raise ValidationError(f"Access denied: {uri}")
    if not path.is_file():
        raise NotFoundError(f"Resource not found: {uri}")
    return path


def read_prompt_resource(uri: str, prompts_dir: Optional[Path] = None) -> str:
    return resolve_prompt_uri(uri, prompts_dir).read_text(encoding="utf-8")
