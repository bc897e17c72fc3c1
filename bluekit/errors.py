"""Error taxonomy for BlueKit operations.

Tool handlers let these propagate to the server, which reports them to the
client as failed tool calls carrying the message.
"""

from __future__ import annotations

from typing import Optional, Sequence


class BlueKitError(Exception):
    """Base class for every error raised by BlueKit."""


class ValidationError(BlueKitError, ValueError):
    """Caller-supplied input has the wrong shape or type."""


class MissingTaskContentError(ValidationError):
    """A blueprint task references a task file with no supplied content."""

    def __init__(self, task_file: str):
        self.task_file = task_file
        super().__init__(f'Missing content for task file "{task_file}" in taskContents')


class NotFoundError(BlueKitError, LookupError):
    """A referenced blueprint, clone, task, project or resource does not exist."""


class ToolNotFoundError(NotFoundError):
    """No registered tool set handles the requested tool name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class PreconditionError(BlueKitError):
    """An operation requires prior state that is absent."""


class NotVersionControlledError(PreconditionError):
    """The project directory is not a git repository."""


class AlreadyExistsError(BlueKitError):
    """The target path of a materialization already exists."""


class StorageIOError(BlueKitError, OSError):
    """Underlying filesystem or subprocess failure."""


class GitCommandError(StorageIOError):
    """A git invocation exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"git {' '.join(self.command)} failed: {detail}")


class ValidatorUnavailableError(BlueKitError):
    """The external diagram validator could not be reached or failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
