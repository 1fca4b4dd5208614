"""Exception hierarchy shared by the agents, backends and HTTP layer."""

from __future__ import annotations


class UIGenError(Exception):
    """Base class for all uigen errors."""


class PlanParseError(UIGenError):
    """The planner response did not contain a usable plan."""


class CodeExtractionError(UIGenError):
    """The generator response did not contain an ``export default function``."""


class CodeValidationError(UIGenError):
    """Generated code uses components, props or styling that are not allowed."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Code validation failed: {', '.join(self.errors)}")


class BackendError(UIGenError):
    """A remote generation backend failed or was unreachable."""


class SessionNotFoundError(UIGenError, KeyError):
    """No session exists with the given id."""

    def __str__(self) -> str:
        return f"Session not found: {self.args[0]}" if self.args else "Session not found"


class VersionNotFoundError(UIGenError, KeyError):
    """The session has no version with the given id."""

    def __str__(self) -> str:
        return f"Version not found: {self.args[0]}" if self.args else "Version not found"
