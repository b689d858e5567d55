"""Value types shared by the scheduler and the due-set selector."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Protocol


DEFAULT_EASINESS_FACTOR = 2.5
DEFAULT_INTERVAL_DAYS = 1


class SchedulableCard(Protocol):
    """Anything exposing the scheduling fields of a card (ORM rows included)."""

    repetitions: int
    easiness_factor: float
    interval_days: int
    next_review_at: Optional[datetime]
    last_reviewed_at: Optional[datetime]
    review_count: int


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps (as returned by SQLite) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(slots=True)
class CardState:
    """In-memory card carrying identity and scheduling fields."""

    id: Any = None
    deck_id: Any = None
    repetitions: int = 0
    easiness_factor: float = DEFAULT_EASINESS_FACTOR
    interval_days: int = DEFAULT_INTERVAL_DAYS
    next_review_at: Optional[datetime] = None
    last_reviewed_at: Optional[datetime] = None
    review_count: int = 0
    created_at: Optional[datetime] = None

    @classmethod
    def new(cls, now: datetime, **identity: Any) -> "CardState":
        """Return a card in its creation-time state, due immediately."""
        return cls(next_review_at=now, created_at=now, **identity)


@dataclass(frozen=True, slots=True)
class StudyCard:
    """Presentation wrapper pairing a card with display-only deck details."""

    card: Any
    deck_name: str

    @property
    def id(self) -> Any:
        return self.card.id
