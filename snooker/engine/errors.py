from __future__ import annotations

from typing import Sequence

from .types import ValidationIssue


class SnookerError(Exception):
    """Base error for the scoring package."""


class ConfigError(SnookerError):
    """Raised when a scoring configuration fails to load or validate."""

    def __init__(self, message: str, issues: Sequence[ValidationIssue] = ()) -> None:
        super().__init__(message)
        self.issues: tuple[ValidationIssue, ...] = tuple(issues)
