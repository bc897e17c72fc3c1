"""YAML front matter schemas and header repair for BlueKit artifacts."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

from .paths import format_alias, slugify

logger = logging.getLogger("bluekit.frontmatter")

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def _is_non_empty_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_list(value: Any) -> bool:
    return isinstance(value, list)


@dataclass(frozen=True)
class FieldSpec:
    """A required header field: its validity check and its default."""

    name: str
    check: Callable[[Any], bool]
    default: Callable[[str], Any]
    fixed: bool = False


def _fixed(name: str, value: str) -> FieldSpec:
    return FieldSpec(name, lambda current: current == value, lambda _: value, fixed=True)


_ID = FieldSpec("id", _is_non_empty_text, slugify)
_ALIAS = FieldSpec("alias", _is_non_empty_text, format_alias)
_IS_BASE = FieldSpec("is_base", _is_bool, lambda _: False)
_VERSION = FieldSpec("version", _is_number, lambda _: 1)
_TAGS = FieldSpec("tags", _is_list, lambda _: [])
_DESCRIPTION = FieldSpec("description", _is_text, lambda _: "")
_CAPABILITIES = FieldSpec("capabilities", _is_list, lambda _: [])

SCHEMAS: Dict[str, Tuple[FieldSpec, ...]] = {
    "kit": (_ID, _ALIAS, _fixed("type", "kit"), _IS_BASE, _VERSION, _TAGS, _DESCRIPTION),
    "walkthrough": (
        _ID, _ALIAS, _fixed("type", "walkthrough"), _IS_BASE, _VERSION, _TAGS, _DESCRIPTION,
    ),
    "agent": (
        _ID, _ALIAS, _fixed("type", "agent"), _VERSION, _DESCRIPTION, _TAGS, _CAPABILITIES,
    ),
    "diagram": (_ALIAS, _DESCRIPTION, _TAGS),
    "task": (_ID, _ALIAS, _fixed("type", "task"), _VERSION, _TAGS, _DESCRIPTION),
}


def schema_for(kind: str) -> Tuple[FieldSpec, ...]:
    try:
        return SCHEMAS[kind]
    except KeyError:
        raise ValueError(f"Unknown artifact kind: {kind}") from None


def dump_header(data: Dict[str, Any]) -> str:
    """Serialize a header mapping without line wrapping."""

    return yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=math.inf,
    ).strip()


def default_header(kind: str, name: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    header = {spec.name: spec.default(name) for spec in schema_for(kind)}
    if overrides:
        header.update(overrides)
    return header


def split_front_matter(content: str) -> Tuple[Optional[Dict[str, Any]], str, bool]:
    """Split ``content`` into ``(header, body, has_block)``.

    ``header`` is ``None`` when no block is present or when the block does not
    decode to a mapping.
    """

    match = FRONT_MATTER_PATTERN.match(content)
    if not match:
        return None, content, False

    body = content[match.end():]
    try:
        data = yaml.safe_load(match.group(1) or "")
    except (yaml.YAMLError, ValueError) as e:
        logger.warning(f"Discarding undecodable front matter: {e}")
        return None, body, True

    if not isinstance(data, dict):
        logger.warning("Discarding front matter that is not a mapping")
        return None, body, True
    return data, body, True


def ensure_final_newline(content: str) -> str:
    return content if content.endswith("\n") else content + "\n"


def repair_header(header: Dict[str, Any], kind: str, name: str) -> Dict[str, Any]:
    """Default missing or wrong-typed fields in place; unknown keys are kept."""

    for spec in schema_for(kind):
        if spec.name not in header or not spec.check(header[spec.name]):
            header[spec.name] = spec.default(name)
    return header


def ensure_front_matter(content: str, kind: str, name: str) -> str:
    """Return ``content`` with a complete, well-typed header for ``kind``.

    Decodable headers are repaired field by field and re-serialized, keeping
    the body byte for byte. Undecodable headers are replaced with defaults.
    Content without a header gets a default header and a blank separator
    line. The result always ends with a newline, and applying the function
    to its own output returns it unchanged.
    """

    header, body, has_block = split_front_matter(content)
    if header is not None:
        repaired = repair_header(header, kind, name)
        return ensure_final_newline(f"---\n{dump_header(repaired)}\n---\n{body}")

    fresh = dump_header(default_header(kind, name))
    if has_block:
        return ensure_final_newline(f"---\n{fresh}\n---\n{body}")
    return ensure_final_newline(f"---\n{fresh}\n---\n\n{content}")


def ensure_task_header(content: str, file_name: str, description: str = "") -> str:
    """Prepend a default task header unless the content already has one.

    Task files have a weaker contract than kits: anything that already starts
    with a ``---`` marker is returned untouched.
    """

    if content.startswith("---"):
        return content

    stem = file_name[:-3] if file_name.endswith(".md") else file_name
    header = default_header("task", stem, {"description": description or ""})
    return ensure_final_newline(f"---\n{dump_header(header)}\n---\n\n{content}")


def strip_front_matter(content: str) -> str:
    match = FRONT_MATTER_PATTERN.match(content)
    return content[match.end():] if match else content


def metadata_warnings(kind: str, content: str) -> List[str]:
    """Completeness warnings for fields the header schema only defaults."""

    header, _, _ = split_front_matter(content)
    if header is None:
        return []

    warnings: List[str] = []
    tags = header.get("tags")
    description = header.get("description")

    if kind == "agent":
        if not isinstance(tags, list) or not tags:
            warnings.append("Tags are empty. Please add at least 1-3 descriptive tags.")
        if not isinstance(description, str) or not description.strip():
            warnings.append("Description is empty. Please add a brief description of the agent's expertise.")
        capabilities = header.get("capabilities")
        if not isinstance(capabilities, list) or not capabilities:
            warnings.append("Capabilities are empty. Please add exactly 3 capability bullet points.")
        elif len(capabilities) != 3:
            warnings.append(
                f"Capabilities should have exactly 3 items (found {len(capabilities)}). "
                "Please adjust to 3 bullet points."
            )
    elif kind == "diagram":
        if not isinstance(tags, list) or not tags:
            warnings.append("Tags are empty. Please add at least 1-5 descriptive tags.")
        if not isinstance(description, str) or not description.strip():
            warnings.append("Description is empty. Please add a brief description of what the diagram shows.")

    return warnings
