"""Domain errors raised by the stores and services.

The HTTP layer maps these onto status codes; stores never swallow them.
"""

from __future__ import annotations

from typing import Any


class SnapShareError(Exception):
    """Base class for SnapShare domain errors."""


class NotFoundError(SnapShareError):
    """A referenced entity does not exist (or has been soft-deleted)."""

    def __init__(self, entity: str, identifier: Any) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity.capitalize()} not found: {identifier}")


class ValidationError(SnapShareError):
    """An identifier or argument is malformed."""


class ConflictError(SnapShareError):
    """The operation conflicts with existing state."""
