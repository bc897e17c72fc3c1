"""Mermaid diagram validation.

Diagrams are checked by an external MCP validator server when it is enabled
and reachable; otherwise a local checker catches the label problems that most
often break mermaid parsing and rewrites the ones it can fix.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from typing import Any, Callable, List, Optional, Sequence, Tuple

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

from .errors import ValidatorUnavailableError
from .frontmatter import FRONT_MATTER_PATTERN, strip_front_matter
from .models import ValidationResult

logger = logging.getLogger("bluekit.mermaid")

ENABLE_ENV = "ENABLE_MERMAID_MCP_VALIDATION"
TIMEOUT_ENV = "MERMAID_VALIDATOR_TIMEOUT"
DEFAULT_TIMEOUT_MS = 10000
VALIDATOR_COMMAND = "npx"
VALIDATOR_ARGS = ("-y", "@rtuin/mcp-mermaid-validator@latest")
VALIDATOR_TOOL = "validateMermaid"

_MERMAID_BLOCK = re.compile(r"```mermaid[ \t]*\r?\n(.*?)\r?\n?```", re.DOTALL)
_GENERIC_BLOCK = re.compile(r"```[ \t]*\r?\n(.*?)\r?\n?```", re.DOTALL)


def extract_mermaid_code(content: str) -> str:
    """Diagram source without front matter or markdown fences."""

    body = strip_front_matter(content)
    for pattern in (_MERMAID_BLOCK, _GENERIC_BLOCK):
        match = pattern.search(body)
        if match:
            return match.group(1).strip()
    return body.strip()


def _timeout_from_env() -> float:
    raw = os.getenv(TIMEOUT_ENV)
    if not raw:
        return DEFAULT_TIMEOUT_MS / 1000
    try:
        return int(raw) / 1000
    except ValueError:
        logger.warning(f"Ignoring invalid {TIMEOUT_ENV}={raw!r}, using {DEFAULT_TIMEOUT_MS}ms")
        return DEFAULT_TIMEOUT_MS / 1000


def interpret_validator_result(content: Sequence[Any], is_error: bool = False) -> ValidationResult:
    """Map the validator's content blocks to a verdict.

    The validator answers with text describing the verdict and, for valid
    diagrams, a rendered PNG image block.
    """

    texts = [block.text for block in content if getattr(block, "type", None) == "text" and block.text]
    image = next((block for block in content if getattr(block, "type", None) == "image"), None)

    lowered = [text.lower() for text in texts]
    is_valid = (
        not is_error
        and any("valid" in text for text in lowered)
        and not any("invalid" in text or "error" in text for text in lowered)
    )
    if not is_valid:
        return ValidationResult(is_valid=False, errors=texts or ["Validator rejected the diagram"])
    return ValidationResult(is_valid=True, rendered_image=getattr(image, "data", None))


class MermaidValidatorClient:
    """MCP client for the mermaid validator server, spawned over stdio."""

    def __init__(
        self,
        enabled: Optional[bool] = None,
        timeout: Optional[float] = None,
        command: str = VALIDATOR_COMMAND,
        args: Sequence[str] = VALIDATOR_ARGS,
    ):
        self.enabled = os.getenv(ENABLE_ENV) != "false" if enabled is None else enabled
        self.timeout = _timeout_from_env() if timeout is None else timeout
        self.server_params = StdioServerParameters(command=command, args=list(args))

    async def _call(self, mermaid_code: str) -> ValidationResult:
        async with stdio_client(self.server_params) as (read, write):
            async with ClientSession(read, write) as session:
                await session.initialize()
                result = await session.call_tool(VALIDATOR_TOOL, arguments={"diagram": mermaid_code})
        return interpret_validator_result(result.content, bool(getattr(result, "isError", False)))

    async def validate(self, mermaid_code: str) -> ValidationResult:
        """Validate ``mermaid_code``.

        Raises ``ValidatorUnavailableError`` when the validator is disabled,
        cannot be started, fails, or exceeds the timeout. An invalid diagram
        is a normal result, not an error.
        """

        if not self.enabled:
            raise ValidatorUnavailableError(f"Mermaid validator disabled via {ENABLE_ENV}")
        try:
            return await asyncio.wait_for(self._call(mermaid_code), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ValidatorUnavailableError(f"Mermaid validator timed out after {self.timeout}s", e) from e
        except Exception as e:
            raise ValidatorUnavailableError(f"Validation failed: {e}", e) from e


# Local fallback checks. Each fixer is (pattern over node labels, message, label rewrite).
_LABEL_FIXERS: Tuple[Tuple[re.Pattern, str, Callable[[str], str]], ...] = (
    (
        re.compile(r"(\w+)\[(@[^\]]+)\]"),
        '@ symbol at start of label "{label}" causes parse errors. Use "{fixed}" instead.',
        lambda label: label[1:],
    ),
    (
        re.compile(r"(\w+)\[([^\]]*\|[^\]]*)\]"),
        'Pipe character "|" in label "{label}" causes parse errors. Use "{fixed}" instead.',
        lambda label: re.sub(r"\s*\|\s*", " / ", label),
    ),
    (
        re.compile(r"(\w+)\[([^\]]*\[[^\]]*)\]"),
        'Nested square brackets in label "{label}" cause parse errors. Removed brackets: "{fixed}"',
        lambda label: label.replace("[", "").replace("]", ""),
    ),
    (
        re.compile(r"(\w+)\[([^\]]*\([^\]]*\)[^\]]*)\]"),
        'Parentheses in label "{label}" cause parse errors (parentheses are used for node shapes). '
        'Removed parentheses: "{fixed}"',
        lambda label: label.replace("(", "").replace(")", ""),
    ),
    (
        re.compile(r"(\w+)\[([^\]]*[\"'][^\]]*)\]"),
        'Quotes in label "{label}" may cause parse errors. Removed quotes: "{fixed}"',
        lambda label: re.sub(r"[\"']", "", label),
    ),
)

_SPECIAL_START = re.compile(r"(\w+)\[([#$%^&*\\{}\[\]<>][^\]]+)\]")
_OPEN_NODE = re.compile(r"(\w+)\[([^\]]*)$")


def _apply_label_fixes(code: str) -> Tuple[str, List[str]]:
    fixes: List[str] = []
    for pattern, message, rewrite in _LABEL_FIXERS:
        def replace(match: re.Match) -> str:
            node, label = match.group(1), match.group(2)
            fixed = rewrite(label)
            fixes.append(f'Line with node "{node}": ' + message.format(label=label, fixed=fixed))
            return f"{node}[{fixed}]"

        code = pattern.sub(replace, code)
    return code, fixes


def _structural_errors(code: str) -> List[str]:
    errors: List[str] = []
    for match in _SPECIAL_START.finditer(code):
        errors.append(
            f'Line with node "{match.group(1)}": Special character at start of label "{match.group(2)}" '
            "may cause parse errors. Consider quoting or escaping."
        )

    lines = code.split("\n")
    for index, raw_line in enumerate(lines):
        line = raw_line.strip()
        if _OPEN_NODE.search(line) and "]" not in line:
            following = lines[index + 1:index + 5]
            if not any("]" in candidate for candidate in following):
                errors.append(f'Line {index + 1}: Potentially unclosed bracket in node definition: "{line}"')

    if code.count("'") % 2:
        errors.append("Unmatched single quotes detected in mermaid code")
    if code.count('"') % 2:
        errors.append("Unmatched double quotes detected in mermaid code")
    return errors


def validate_mermaid_syntax(content: str) -> ValidationResult:
    """Check diagram content locally and auto-fix label problems.

    ``content`` is the full artifact (front matter included). The returned
    ``errors`` list carries only the problems that could not be fixed;
    ``fixed_content`` is set when at least one label was rewritten.
    """

    block = _MERMAID_BLOCK.search(content)
    if block:
        code = block.group(1)
        fixed_code, fixes = _apply_label_fixes(code)
        fixed_content = content[:block.start(1)] + fixed_code + content[block.end(1):]
    else:
        header = FRONT_MATTER_PATTERN.match(content)
        if not header:
            return ValidationResult(is_valid=False, errors=["No mermaid code block found"], method="fallback")
        code = content[header.end():]
        fixed_code, fixes = _apply_label_fixes(code)
        fixed_content = content[:header.end()] + fixed_code

    errors = _structural_errors(fixed_code)
    for fix in fixes:
        logger.info(f"Auto-fixed mermaid syntax: {fix}")
    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        fixed_content=fixed_content if fixes else None,
        auto_fixed=len(fixes),
        method="fallback",
    )


async def validate_diagram(content: str, client: Optional[MermaidValidatorClient]) -> ValidationResult:
    """Validate with the MCP validator, falling back to the local checker."""

    if client is not None:
        try:
            return await client.validate(extract_mermaid_code(content))
        except ValidatorUnavailableError as e:
            logger.warning(f"MCP validation unavailable, using fallback: {e}")
    return validate_mermaid_syntax(content)
