"""Study sessions: build review queues and persist graded reviews."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.db import Deck
from src.db.cards import get_card, list_cards_for_decks, record_card_review
from src.db.decks import get_deck_statistics
from src.srs.formatting import format_interval
from src.srs.grades import coerce_grade, map_button_to_grade
from src.srs.scheduler import ReviewSchedule, process_review
from src.srs.selection import DeckStatistics, select_due_for_decks, shuffle_cards
from src.srs.state import StudyCard


LOGGER = logging.getLogger(__name__)

STUDY_MODES = ("due", "all")
SAVE_FAILED_MESSAGE = "Failed to save progress."
CARD_NOT_FOUND_MESSAGE = "Card not found."


@dataclass(slots=True)
class ReviewOutcome:
    """Result of grading one card."""

    card_id: int
    saved: bool
    schedule: Optional[ReviewSchedule] = None
    errors: List[str] = field(default_factory=list)

    @property
    def interval_label(self) -> Optional[str]:
        if self.schedule is None:
            return None
        return format_interval(self.schedule.interval_days)


class StudyService:
    """Coordinates due-set selection, the scheduler, and card persistence."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        mode: str = "due",
        shuffle: bool = True,
        rng: Optional[random.Random] = None,
    ) -> None:
        if mode not in STUDY_MODES:
            raise ValueError(f"Unknown study mode {mode!r}; expected one of {', '.join(STUDY_MODES)}.")
        self._session_factory = session_factory
        self._mode = mode
        self._shuffle = shuffle
        self._rng = rng or random.Random()

    @property
    def mode(self) -> str:
        return self._mode

    async def load_queue(
        self,
        deck_ids: Sequence[int],
        now: Optional[datetime] = None,
    ) -> list[StudyCard]:
        """Return the cards to study from the selected decks."""
        if now is None:
            now = datetime.now(timezone.utc)
        if not deck_ids:
            return []

        async with self._session_factory() as session:
            result = await session.execute(select(Deck).where(Deck.id.in_(list(deck_ids))))
            deck_names = {deck.id: deck.name for deck in result.scalars()}
            cards_by_deck = await list_cards_for_decks(
                session, [deck_id for deck_id in deck_ids if deck_id in deck_names]
            )

        if self._mode == "due":
            cards = select_due_for_decks(cards_by_deck, now, shuffle=self._shuffle, rng=self._rng)
        else:
            cards = [card for deck_cards in cards_by_deck.values() for card in deck_cards]
            if self._shuffle:
                cards = shuffle_cards(cards, self._rng)

        LOGGER.info(
            "Loaded %d cards from %d deck(s) in %s mode.", len(cards), len(cards_by_deck), self._mode
        )
        return [StudyCard(card=card, deck_name=deck_names[card.deck_id]) for card in cards]

    async def review(
        self,
        card_id: int,
        grade: int,
        now: Optional[datetime] = None,
    ) -> ReviewOutcome:
        """Grade a card and persist its new schedule in one transaction."""
        quality = coerce_grade(grade)
        if now is None:
            now = datetime.now(timezone.utc)

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    card = await get_card(session, card_id)
                    if card is None:
                        return ReviewOutcome(card_id=card_id, saved=False, errors=[CARD_NOT_FOUND_MESSAGE])

                    schedule = process_review(card, quality, now)
                    await record_card_review(session, card, quality, schedule)
        except SQLAlchemyError:
            LOGGER.exception("Failed to save review for card %s.", card_id)
            return ReviewOutcome(card_id=card_id, saved=False, errors=[SAVE_FAILED_MESSAGE])

        LOGGER.info(
            "Card %s updated: repetitions=%d, interval=%dd, EF=%.2f",
            card_id,
            schedule.repetitions,
            schedule.interval_days,
            schedule.easiness_factor,
        )
        return ReviewOutcome(card_id=card_id, saved=True, schedule=schedule)

    async def review_button(
        self,
        card_id: int,
        button: str,
        was_correct: bool,
        now: Optional[datetime] = None,
    ) -> ReviewOutcome:
        """Grade a card from the three-button answer UI."""
        return await self.review(card_id, map_button_to_grade(button, was_correct), now)

    async def deck_statistics(self, deck_id: int, now: Optional[datetime] = None) -> DeckStatistics:
        async with self._session_factory() as session:
            return await get_deck_statistics(session, deck_id, now)
