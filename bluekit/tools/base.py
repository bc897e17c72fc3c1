"""Tool set base class and helpers shared by the BlueKit tool sets."""

from __future__ import annotations

import os
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from ..artifacts import require_string
from ..errors import ValidationError
from ..models import ToolDefinition

TextContent = Dict[str, str]
ToolResult = List[TextContent]
ToolHandler = Callable[[Dict[str, Any]], Union[ToolResult, Awaitable[ToolResult]]]


def normalize_tool_name(name: str) -> str:
    """``bluekit_kit_generateKit`` and ``bluekit.kit.generateKit`` normalize alike."""

    return name.replace("_", ".")


def text_result(text: str) -> ToolResult:
    return [{"type": "text", "text": text}]


def format_warnings(warnings: Sequence[str]) -> str:
    return "".join(f"\n⚠️  {warning}" for warning in warnings)


def object_schema(properties: Optional[Dict[str, Any]] = None, required: Sequence[str] = ()) -> Dict[str, Any]:
    return {"type": "object", "properties": properties or {}, "required": list(required)}


def string_property(description: str) -> Dict[str, str]:
    return {"type": "string", "description": description}


def optional_string(params: Dict[str, Any], key: str, default: str = "") -> str:
    value = params.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def optional_bool(params: Dict[str, Any], key: str) -> bool:
    value = params.get(key, False)
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be a boolean")
    return value


def project_path_or_cwd(params: Dict[str, Any]) -> str:
    return optional_string(params, "projectPath") or os.getcwd()


def generation_instructions(
    title: str,
    description: str,
    project_path: str,
    body: str,
    next_steps: Sequence[str],
) -> str:
    """Markdown handed back by the ``create*`` tools."""

    lines = [
        f"# {title} Generation Instructions",
        "",
        "## User Request",
        description,
        "",
        body.strip(),
        "",
        "## Project Context",
        f"Project path: {project_path}",
        "",
        "## Next Steps",
        "",
    ]
    lines.extend(f"{index}. {step}" for index, step in enumerate(next_steps, start=1))
    return "\n".join(lines)


class ToolSet:
    """A group of tools with their catalog entries and handlers.

    Subclasses return their catalog from ``create_definitions`` and a
    mapping of declared tool name to handler from ``create_handlers``.
    """

    def __init__(self):
        self._definitions = self.create_definitions()
        self._handlers = self.create_handlers()
        self._normalized = {normalize_tool_name(name): handler for name, handler in self._handlers.items()}

    def create_definitions(self) -> List[ToolDefinition]:
        raise NotImplementedError

    def create_handlers(self) -> Dict[str, ToolHandler]:
        raise NotImplementedError

    def definitions(self) -> List[ToolDefinition]:
        return list(self._definitions)

    def handler(self, name: str) -> Optional[ToolHandler]:
        """Handler for ``name`` trying the normalized spelling, then the raw one."""

        return self._normalized.get(normalize_tool_name(name)) or self._handlers.get(name)


__all__ = [
    "ToolSet",
    "ToolHandler",
    "ToolResult",
    "format_warnings",
    "generation_instructions",
    "normalize_tool_name",
    "object_schema",
    "optional_bool",
    "optional_string",
    "project_path_or_cwd",
    "require_string",
    "string_property",
    "text_result",
]
