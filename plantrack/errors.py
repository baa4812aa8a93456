"""Error types raised by plan and analysis operations."""

from __future__ import annotations


class PlanTrackError(Exception):
    """Base class for recoverable plan tracking errors."""


class InvalidInput(PlanTrackError, ValueError):
    """Raised when a supplied value is missing, non-numeric or out of range."""


class NotFound(PlanTrackError, LookupError):
    """Raised when a plan, year or asset does not exist."""
