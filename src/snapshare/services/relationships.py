"""Three-state machine shared by likes, follows and comment-likes.

Each (actor, target) pair moves ABSENT -> ACTIVE -> INACTIVE -> ACTIVE -> ...
and never returns to ABSENT once its row exists. Every transition carries the
delta the target's denormalized counter must receive in the same step.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

__all__ = [
    "RelationshipKind",
    "RelationshipState",
    "ToggleOutcome",
    "Transition",
    "plan_set",
    "plan_toggle",
    "state_of",
]


class RelationshipState(str, Enum):
    """State of one (actor, target) relationship."""

    ABSENT = "absent"
    ACTIVE = "active"
    INACTIVE = "inactive"

    @property
    def is_active(self) -> bool:
        return self is RelationshipState.ACTIVE


class RelationshipKind(Enum):
    """Relationship kinds and the counter each one maintains."""

    LIKE = ("like", "photo", "like_count")
    FOLLOW = ("follow", "user", "follower_count")
    COMMENT_LIKE = ("comment_like", "comment", "like_count")

    def __init__(self, label: str, target_entity: str, counter_field: str) -> None:
        self.label = label
        self.target_entity = target_entity
        self.counter_field = counter_field


@dataclass(frozen=True, slots=True)
class Transition:
    """A planned or applied state change."""

    from_state: RelationshipState
    to_state: RelationshipState
    delta: int

    @property
    def creates_row(self) -> bool:
        return self.from_state is RelationshipState.ABSENT

    @property
    def activated(self) -> bool:
        return self.to_state is RelationshipState.ACTIVE


_TOGGLE_TABLE: dict[RelationshipState, Transition] = {
    RelationshipState.ABSENT: Transition(RelationshipState.ABSENT, RelationshipState.ACTIVE, +1),
    RelationshipState.ACTIVE: Transition(RelationshipState.ACTIVE, RelationshipState.INACTIVE, -1),
    RelationshipState.INACTIVE: Transition(RelationshipState.INACTIVE, RelationshipState.ACTIVE, +1),
}


def state_of(is_deleted: bool | None) -> RelationshipState:
    """Map a row's soft-delete flag (``None`` for no row) onto a state."""
    if is_deleted is None:
        return RelationshipState.ABSENT
    return RelationshipState.INACTIVE if is_deleted else RelationshipState.ACTIVE


def plan_toggle(state: RelationshipState) -> Transition:
    """Return the transition a toggle performs from ``state``."""
    return _TOGGLE_TABLE[state]


def plan_set(state: RelationshipState, active: bool) -> Transition | None:
    """Return the transition that reaches the requested activity, if any.

    ``None`` means the relationship already matches ``active``; deactivating an
    absent relationship is also a no-op so no row is ever created inactive.
    """
    if state.is_active == active:
        return None
    return _TOGGLE_TABLE[state]


@dataclass(frozen=True, slots=True)
class ToggleOutcome:
    """Result of a toggle or directional set against one target."""

    kind: RelationshipKind
    target_id: UUID
    state: RelationshipState
    count: int
    transition: Transition | None = None

    @property
    def changed(self) -> bool:
        return self.transition is not None
