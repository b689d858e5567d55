"""Helpers for working with card persistence."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.srs.scheduler import ReviewSchedule, initial_state

from . import Card, CardReview, Deck


def _require_text(value: str, field_name: str) -> str:
    normalized = value.strip() if isinstance(value, str) else ""
    if not normalized:
        raise ValueError(f"Card {field_name} must not be empty.")
    return normalized


async def create_card(
    session: AsyncSession,
    deck_id: int,
    front: str,
    back: str,
    now: Optional[datetime] = None,
) -> Card:
    """Add a card to a deck in its initial, immediately due state."""
    if now is None:
        now = datetime.now(timezone.utc)

    front = _require_text(front, "front")
    back = _require_text(back, "back")

    deck = await session.get(Deck, deck_id)
    if deck is None:
        raise LookupError(f"Deck {deck_id} does not exist.")

    card = Card(deck_id=deck.id, front=front, back=back, created_at=now, updated_at=now)
    card.apply_schedule(initial_state(now))
    session.add(card)
    await session.flush()
    return card


async def get_card(session: AsyncSession, card_id: int) -> Optional[Card]:
    return await session.get(Card, card_id)


async def list_cards(session: AsyncSession, deck_id: int) -> list[Card]:
    """Return a deck's cards, newest first."""
    stmt = (
        select(Card)
        .where(Card.deck_id == deck_id)
        .order_by(Card.created_at.desc(), Card.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_cards_for_decks(
    session: AsyncSession,
    deck_ids: Sequence[int],
) -> dict[int, list[Card]]:
    """Return cards grouped by deck, keyed in the order ``deck_ids`` was given."""
    grouped: dict[int, list[Card]] = {deck_id: [] for deck_id in deck_ids}
    if not grouped:
        return grouped

    stmt = (
        select(Card)
        .where(Card.deck_id.in_(list(grouped)))
        .order_by(Card.created_at, Card.id)
    )
    result = await session.execute(stmt)
    for card in result.scalars():
        grouped[card.deck_id].append(card)
    return grouped


async def update_card_content(
    session: AsyncSession,
    card: Card,
    front: str,
    back: str,
    now: Optional[datetime] = None,
) -> Card:
    """Edit the text of a card. Scheduling fields are left untouched."""
    if now is None:
        now = datetime.now(timezone.utc)

    card.front = _require_text(front, "front")
    card.back = _require_text(back, "back")
    card.updated_at = now
    await session.flush()
    return card


async def delete_card(session: AsyncSession, card_id: int) -> bool:
    card = await session.get(Card, card_id)
    if card is None:
        return False
    await session.delete(card)
    await session.flush()
    return True


async def record_card_review(
    session: AsyncSession,
    card: Card,
    grade: int,
    schedule: ReviewSchedule,
) -> None:
    """Persist a review outcome: all scheduling fields plus a history row."""
    card.apply_schedule(schedule)
    card.updated_at = schedule.last_reviewed_at

    session.add(
        CardReview(
            card_id=card.id,
            grade=int(grade),
            interval_days=schedule.interval_days,
            easiness_factor=schedule.easiness_factor,
            reviewed_at=schedule.last_reviewed_at,
        )
    )
    await session.flush()


async def list_card_reviews(session: AsyncSession, card_id: int) -> list[CardReview]:
    stmt = (
        select(CardReview)
        .where(CardReview.card_id == card_id)
        .order_by(CardReview.reviewed_at, CardReview.id)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
