"""Backup export of every deck and card."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.srs.state import ensure_utc

from . import Card
from .decks import list_decks


EXPORT_VERSION = "1.0"


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    value = ensure_utc(value)
    return value.isoformat() if value is not None else None


def _card_record(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "deck_id": card.deck_id,
        "front": card.front,
        "back": card.back,
        "repetitions": card.repetitions,
        "easiness_factor": card.easiness_factor,
        "interval_days": card.interval_days,
        "next_review_at": _isoformat(card.next_review_at),
        "last_reviewed_at": _isoformat(card.last_reviewed_at),
        "review_count": card.review_count,
        "created_at": _isoformat(card.created_at),
    }


async def export_collection(
    session: AsyncSession,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Return a JSON-serialisable snapshot of all decks and cards."""
    if now is None:
        now = datetime.now(timezone.utc)

    decks = await list_decks(session)
    result = await session.execute(select(Card).order_by(Card.deck_id, Card.created_at, Card.id))

    return {
        "version": EXPORT_VERSION,
        "exportDate": _isoformat(now),
        "decks": [
            {
                "id": deck.id,
                "name": deck.name,
                "description": deck.description,
                "created_at": _isoformat(deck.created_at),
                "card_count": deck.card_count,
            }
            for deck in decks
        ],
        "cards": [_card_record(card) for card in result.scalars()],
    }


async def export_collection_json(session: AsyncSession, now: Optional[datetime] = None) -> str:
    return json.dumps(await export_collection(session, now), ensure_ascii=False, indent=2)
