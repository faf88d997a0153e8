"""Exceptions raised by the scaffolder.

Everything derives from :class:`ProjexError` so the CLI can report any
scaffolding failure uniformly and exit with a failure status.
"""

from __future__ import annotations

from pathlib import Path


class ProjexError(Exception):
    """Base class for all scaffolding errors."""


class TemplateNotFoundError(ProjexError):
    """Raised when no template matches the requested id."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")


class InvalidTemplateError(ProjexError):
    """Raised when a template exists but its source tree is unusable."""


class MissingVariableError(ProjexError):
    """Raised in non-interactive mode when a variable has no value."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing required variable: {name}")


class PatternValidationError(ProjexError):
    """Raised when a value does not match its declared pattern.

    ``str(error)`` is the human-readable, pattern-specific message.
    """

    def __init__(self, name: str, value: str, pattern: str, message: str) -> None:
        self.name = name
        self.value = value
        self.pattern = pattern
        super().__init__(message)


class InputCancelledError(ProjexError):
    """Raised when the user aborts an interactive prompt."""

    def __init__(self, message: str = "Input cancelled") -> None:
        super().__init__(message)


class TargetNotEmptyError(ProjexError):
    """Raised before any write when the destination directory has content."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Directory is not empty: {path}")


class TemplateIOError(ProjexError):
    """A read, write, copy or mkdir failure, annotated with the path involved."""

    def __init__(self, action: str, path: Path | str, cause: BaseException) -> None:
        self.action = action
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to {action} {path}: {cause}")
