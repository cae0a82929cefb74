"""Error types shared across Agent Work Log components."""

from __future__ import annotations


class WorklogError(RuntimeError):
    """Base class for errors reported to the user as a single line."""


class InvalidInput(WorklogError):
    """Raised for bad arguments such as an empty description or a non-positive day count."""


class InvalidEntry(InvalidInput):
    """Raised when a work entry is missing its description or working directory."""


class StoreUnavailable(WorklogError):
    """Raised when the work log database cannot be created, opened or read."""


class SummaryGenerationFailed(WorklogError):
    """Raised when the text-generation collaborator fails mid-summary."""


__all__ = [
    "WorklogError",
    "InvalidInput",
    "InvalidEntry",
    "StoreUnavailable",
    "SummaryGenerationFailed",
]
