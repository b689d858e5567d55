"""Helpers for working with deck persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.srs.selection import DeckStatistics, compute_statistics

from . import Card, Deck


@dataclass(slots=True)
class DeckSummary:
    """A deck together with the number of cards it owns."""

    id: int
    name: str
    description: Optional[str]
    created_at: datetime
    card_count: int


async def create_deck(
    session: AsyncSession,
    name: str,
    description: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Deck:
    """Create an empty deck. Blank names are rejected; duplicates are allowed."""
    if now is None:
        now = datetime.now(timezone.utc)

    normalized_name = name.strip() if isinstance(name, str) else ""
    if not normalized_name:
        raise ValueError("Deck name must not be empty.")
    if isinstance(description, str):
        description = description.strip() or None

    deck = Deck(name=normalized_name, description=description, created_at=now)
    session.add(deck)
    await session.flush()
    return deck


async def get_deck(session: AsyncSession, deck_id: int) -> Optional[Deck]:
    return await session.get(Deck, deck_id)


async def list_decks(session: AsyncSession) -> list[DeckSummary]:
    """Return all decks, newest first, with their card counts."""
    stmt = (
        select(Deck, func.count(Card.id))
        .outerjoin(Card, Card.deck_id == Deck.id)
        .group_by(Deck.id)
        .order_by(Deck.created_at.desc(), Deck.id.desc())
    )
    result = await session.execute(stmt)
    return [
        DeckSummary(
            id=deck.id,
            name=deck.name,
            description=deck.description,
            created_at=deck.created_at,
            card_count=card_count,
        )
        for deck, card_count in result.all()
    ]


async def delete_deck(session: AsyncSession, deck_id: int) -> bool:
    """Delete a deck and, through the cascade, every card it owns."""
    deck = await session.get(Deck, deck_id)
    if deck is None:
        return False
    await session.delete(deck)
    await session.flush()
    return True


async def get_deck_statistics(
    session: AsyncSession,
    deck_id: int,
    now: Optional[datetime] = None,
) -> DeckStatistics:
    """Return dashboard counts for one deck."""
    result = await session.execute(select(Card).where(Card.deck_id == deck_id))
    return compute_statistics(result.scalars().all(), now)
