"""Due-card selection and deck statistics."""

from __future__ import annotations

import logging
import random
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional, Sequence, TypeVar

from .state import ensure_utc


LOGGER = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

CardT = TypeVar("CardT")


@dataclass(frozen=True, slots=True)
class DeckStatistics:
    """Card counts shown on deck dashboards."""

    total: int = 0
    new: int = 0
    learning: int = 0
    mature: int = 0
    due: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def is_due(card, now: datetime) -> bool:
    """A card is due when it has no review time or that time has passed."""
    next_review_at = ensure_utc(card.next_review_at)
    return next_review_at is None or next_review_at <= ensure_utc(now)


def is_new(card) -> bool:
    return card.repetitions == 0 and card.last_reviewed_at is None


def _queue_key(card) -> tuple:
    # None review times sort first, as SQL does for ascending NULLs.
    next_review_at = ensure_utc(card.next_review_at)
    created_at = ensure_utc(getattr(card, "created_at", None))
    card_id = getattr(card, "id", None)
    return (
        0 if is_new(card) else 1,
        next_review_at is not None,
        next_review_at or _EPOCH,
        created_at or _EPOCH,
        card_id if isinstance(card_id, (int, float)) else 0,
    )


def select_due(cards: Iterable[CardT], now: datetime | None = None) -> list[CardT]:
    """Return the due cards ordered for study.

    New cards come first, then cards by ascending ``next_review_at``, with
    creation order breaking ties.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    due_cards = [card for card in cards if is_due(card, now)]
    return sorted(due_cards, key=_queue_key)


def shuffle_cards(cards: Sequence[CardT], rng: Optional[random.Random] = None) -> list[CardT]:
    """Return a uniformly shuffled copy of ``cards``."""
    shuffled = list(cards)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled


def select_due_for_decks(
    cards_by_deck: Mapping[object, Iterable[CardT]],
    now: datetime | None = None,
    *,
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
) -> list[CardT]:
    """Gather each deck's due cards and combine them into a single queue.

    Without ``shuffle`` the decks are concatenated in mapping order, each in
    ``select_due`` order. With ``shuffle`` the combined queue is permuted so
    decks are interleaved.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    combined: list[CardT] = []
    for deck_id, cards in cards_by_deck.items():
        deck_queue = select_due(cards, now)
        LOGGER.debug("Deck %s has %d due cards.", deck_id, len(deck_queue))
        combined.extend(deck_queue)

    if shuffle:
        combined = shuffle_cards(combined, rng)
    return combined


def compute_statistics(cards: Iterable, now: datetime | None = None) -> DeckStatistics:
    """Count cards per learning stage plus how many are due.

    A card that lapsed back to zero repetitions after being reviewed is
    counted as learning, so ``new + learning + mature == total`` always holds.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    total = new = learning = mature = due = 0
    for card in cards:
        total += 1
        if is_new(card):
            new += 1
        elif card.repetitions < 2:
            learning += 1
        else:
            mature += 1
        if is_due(card, now):
            due += 1

    return DeckStatistics(total=total, new=new, learning=learning, mature=mature, due=due)
