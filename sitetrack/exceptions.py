"""Exceptions raised by the storage layer.

Hierarchy::

    SiteTrackError
    └── DuplicateValueError
"""
from typing import Any, Dict, Optional


class SiteTrackError(Exception):
    """Base exception for SiteTrack errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details: Dict[str, Any] = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | details={self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"


class DuplicateValueError(SiteTrackError):
    """Raised when a write collides with a unique column (e.g. a user's email)."""

    def __init__(self, field: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Duplicate value for unique field {field!r}", details)
        self.field = field
