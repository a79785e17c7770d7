"""Exception hierarchy for kickoff.

Every fatal condition raised by the resolution pipeline, the hook runner or
the reference template adapter derives from :class:`KickoffError`, so the CLI
can catch a single type and print the chain of causes.
"""

from __future__ import annotations

from typing import Any


class KickoffError(Exception):
    """Base class for all kickoff failures."""


class ConfigError(KickoffError):
    """Raised when the run configuration is contradictory."""


# ---------------------------------------------------------------------------
# Input errors
# ---------------------------------------------------------------------------


class InputFileError(KickoffError):
    """Raised when the JSON input file is missing or is not valid JSON."""

    def __init__(self, message: str, path: Any = None) -> None:
        self.path = path
        super().__init__(message)


class InputShapeError(KickoffError):
    """Raised when the JSON input document is not a single flat object."""


class UnsupportedValueError(KickoffError):
    """Raised when a JSON value cannot be represented as a variable value."""

    reason = "unsupported value"

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        if name is None:
            message = f"Invalid value: {self.reason}"
        else:
            message = f"Invalid type for variable `{name}` in input file: {self.reason}"
        super().__init__(message)


class FloatValueError(UnsupportedValueError):
    reason = "only integer numbers are supported"


class NullValueError(UnsupportedValueError):
    reason = "null is not supported"


class NestedValueError(UnsupportedValueError):
    reason = "nested arrays/objects are not supported"


class MissingVariableError(KickoffError):
    """Raised when an applicable variable is absent from the JSON input."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing required variable `{name}` in input file")


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------


class EvaluationError(KickoffError):
    """Raised when a condition or default expression cannot be evaluated."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"Variable `{name}`: {message}")


class PromptError(KickoffError):
    """Raised when an interactive prompt is aborted or cannot be answered."""


class TemplateError(KickoffError):
    """Raised when a template cannot be loaded, rendered or written."""


class HookError(KickoffError):
    """Raised when a hook cannot be spawned or exits with a non-zero code."""

    def __init__(self, hook: Any, message: str, returncode: int | None = None) -> None:
        self.hook = hook
        self.returncode = returncode
        super().__init__(message)
