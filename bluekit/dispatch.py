"""Tool dispatch: one name-to-handler table over every tool set."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .bluekit_logging import log_error_with_context, observability_hooks
from .errors import ToolNotFoundError, ValidationError
from .models import BatchOutcome, BatchReport, ToolDefinition
from .tools.base import ToolHandler, ToolResult, ToolSet

logger = logging.getLogger("bluekit.dispatch")


class ToolDispatcher:
    """Aggregate tool sets and route calls to their handlers.

    Tool sets are searched in registration order and the first one that
    knows a name wins; a later set declaring the same normalized name is
    shadowed without warning.
    """

    def __init__(self, tool_sets: Iterable[ToolSet]):
        self.tool_sets: List[ToolSet] = []
        for tool_set in tool_sets:
            self.register(tool_set)

    def register(self, tool_set: ToolSet) -> None:
        if hasattr(tool_set, "dispatcher"):
            tool_set.dispatcher = self
        self.tool_sets.append(tool_set)

    def definitions(self) -> List[ToolDefinition]:
        """Catalog of every tool set, concatenated without de-duplication."""
        return [definition for tool_set in self.tool_sets for definition in tool_set.definitions()]

    def resolve(self, name: str) -> Optional[ToolHandler]:
        for tool_set in self.tool_sets:
            handler = tool_set.handler(name)
            if handler is not None:
                return handler
        return None

    async def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """Run the handler for ``name``; errors propagate unchanged."""

        handler = self.resolve(name)
        if handler is None:
            raise ToolNotFoundError(name)

        logger.info(f"Tool call: {name}")
        try:
            result = handler(dict(arguments or {}))
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            log_error_with_context(e, {"operation": "tool_call", "tool": name})
            raise

        observability_hooks.log_event("tool_called", tool=name)
        return result

    async def batch_execute(self, calls: Sequence[Any]) -> BatchReport:
        """Run ``calls`` one after another, isolating failures per call."""

        report = BatchReport()
        for call in calls:
            name = call.get("name") if isinstance(call, dict) else None
            label = name if isinstance(name, str) else "unknown"
            try:
                if not isinstance(name, str) or not name:
                    raise ValidationError("Each task must have a name (string)")
                params = call.get("params")
                if not isinstance(params, dict):
                    raise ValidationError("Each task must have params (object)")
                result = await self.call(name, params)
            except Exception as e:
                logger.warning(f"Batch call {label} failed: {e}")
                report.outcomes.append(BatchOutcome(task=label, success=False, error=str(e)))
            else:
                report.outcomes.append(BatchOutcome(task=label, success=True, result=result))

        logger.info(f"Batch finished: {report.succeeded} succeeded, {report.failed} failed")
        return report
