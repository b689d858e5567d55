"""Spaced-repetition scheduling for flashcard reviews (SM-2)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .grades import ReviewGrade, coerce_grade
from .state import DEFAULT_EASINESS_FACTOR, DEFAULT_INTERVAL_DAYS, SchedulableCard


MIN_EASINESS_FACTOR = 1.3
MAX_EASINESS_FACTOR = 3.0
MAX_INTERVAL_DAYS = 36500
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6

PREVIEW_GRADES = (
    ReviewGrade.INCORRECT_EASY,
    ReviewGrade.CORRECT_DIFFICULT,
    ReviewGrade.CORRECT_HESITATION,
    ReviewGrade.PERFECT,
)


@dataclass(frozen=True, slots=True)
class ReviewSchedule:
    """Scheduling fields of a card after a review, replaced as one unit."""

    repetitions: int
    easiness_factor: float
    interval_days: int
    next_review_at: datetime
    last_reviewed_at: Optional[datetime]
    review_count: int

    @property
    def fields(self) -> dict:
        return {
            "repetitions": self.repetitions,
            "easiness_factor": self.easiness_factor,
            "interval_days": self.interval_days,
            "next_review_at": self.next_review_at,
            "last_reviewed_at": self.last_reviewed_at,
            "review_count": self.review_count,
        }


def round_half_up(value: float, places: int = 0) -> float:
    """Round to the nearest value, ties away from zero."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def _next_easiness(easiness_factor: float, grade: int) -> float:
    q = 5 - grade
    easiness_factor += 0.1 - q * (0.08 + q * 0.02)
    easiness_factor = min(MAX_EASINESS_FACTOR, max(MIN_EASINESS_FACTOR, easiness_factor))
    return round_half_up(easiness_factor, 2)


def initial_state(now: datetime | None = None) -> ReviewSchedule:
    """Return the scheduling fields of a freshly created card."""
    if now is None:
        now = datetime.now(timezone.utc)

    return ReviewSchedule(
        repetitions=0,
        easiness_factor=DEFAULT_EASINESS_FACTOR,
        interval_days=DEFAULT_INTERVAL_DAYS,
        next_review_at=now,
        last_reviewed_at=None,
        review_count=0,
    )


def process_review(
    card: SchedulableCard,
    grade: int,
    now: datetime | None = None,
) -> ReviewSchedule:
    """Return the card's next schedule for the given recall grade.

    Successful recalls (grade >= 3) walk the 1 day, 6 days, then
    ``previous interval * easiness`` ramp; failures restart it at one day.
    The interval uses the easiness factor held *before* this review.
    """
    quality = coerce_grade(grade)
    if now is None:
        now = datetime.now(timezone.utc)

    repetitions = card.repetitions
    interval = card.interval_days

    if quality.is_success:
        repetitions += 1
        if repetitions == 1:
            interval = FIRST_INTERVAL_DAYS
        elif repetitions == 2:
            interval = SECOND_INTERVAL_DAYS
        else:
            interval = max(1, int(round_half_up(interval * card.easiness_factor)))
            interval = min(interval, MAX_INTERVAL_DAYS)
    else:
        repetitions = 0
        interval = FIRST_INTERVAL_DAYS

    return ReviewSchedule(
        repetitions=repetitions,
        easiness_factor=_next_easiness(card.easiness_factor, quality),
        interval_days=interval,
        next_review_at=now + timedelta(days=interval),
        last_reviewed_at=now,
        review_count=(card.review_count or 0) + 1,
    )


def preview_intervals(
    card: SchedulableCard,
    now: datetime | None = None,
) -> dict[ReviewGrade, int]:
    """Interval each answer button would produce, without touching the card."""
    if now is None:
        now = datetime.now(timezone.utc)
    return {grade: process_review(card, grade, now).interval_days for grade in PREVIEW_GRADES}
