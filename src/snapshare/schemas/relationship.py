"""Schemas describing the outcome of relationship toggles."""

from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from snapshare.services.relationships import ToggleOutcome


class ToggleResponse(BaseModel):
    """Relationship state and target counter after a like/follow call."""

    target_id: UUID
    state: str = Field(..., description="absent, active or inactive")
    active: bool
    count: int = Field(..., description="Target counter after the call")
    changed: bool = Field(..., description="False when the call was a no-op")

    @classmethod
    def from_outcome(cls, outcome: "ToggleOutcome") -> "ToggleResponse":
        """Build the response from a store toggle outcome."""
        return cls(
            target_id=outcome.target_id,
            state=outcome.state.value,
            active=outcome.state.is_active,
            count=outcome.count,
            changed=outcome.changed,
        )
