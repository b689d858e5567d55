from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.srs.grades import InvalidGradeError, ReviewGrade
from src.srs.scheduler import (
    MAX_EASINESS_FACTOR,
    MAX_INTERVAL_DAYS,
    MIN_EASINESS_FACTOR,
    initial_state,
    preview_intervals,
    process_review,
)
from src.srs.state import CardState


NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def _reviewed(repetitions: int, easiness: float, interval: int, review_count: int = 3) -> CardState:
    return CardState(
        id=1,
        repetitions=repetitions,
        easiness_factor=easiness,
        interval_days=interval,
        next_review_at=NOW,
        last_reviewed_at=NOW - timedelta(days=interval),
        review_count=review_count,
    )


def test_new_card_perfect_recall() -> None:
    card = CardState.new(NOW)

    schedule = process_review(card, 5, NOW)

    assert schedule.repetitions == 1
    assert schedule.interval_days == 1
    assert schedule.easiness_factor == 2.6
    assert schedule.review_count == 1
    assert schedule.last_reviewed_at == NOW
    assert schedule.next_review_at == NOW + timedelta(days=1)


def test_second_success_moves_to_six_days() -> None:
    schedule = process_review(_reviewed(1, 2.6, 1), 4, NOW)

    assert schedule.repetitions == 2
    assert schedule.interval_days == 6
    assert schedule.easiness_factor == 2.6
    assert schedule.next_review_at == NOW + timedelta(days=6)


def test_later_success_multiplies_previous_interval() -> None:
    schedule = process_review(_reviewed(2, 2.6, 6), 5, NOW)

    assert schedule.repetitions == 3
    assert schedule.interval_days == 16
    assert schedule.easiness_factor == 2.7


def test_interval_uses_easiness_before_update() -> None:
    # Grade 3 lowers easiness to 2.36; the interval must still use 2.5.
    schedule = process_review(_reviewed(4, 2.5, 10), 3, NOW)

    assert schedule.interval_days == 25
    assert schedule.easiness_factor == 2.36


def test_blackout_resets_and_clamps_easiness() -> None:
    schedule = process_review(_reviewed(3, 1.3, 16), 0, NOW)

    assert schedule.repetitions == 0
    assert schedule.interval_days == 1
    assert schedule.easiness_factor == MIN_EASINESS_FACTOR
    assert schedule.next_review_at == NOW + timedelta(days=1)


@pytest.mark.parametrize("grade", [0, 1, 2])
@pytest.mark.parametrize("repetitions,interval", [(0, 1), (1, 1), (2, 6), (7, 120)])
def test_failed_review_restarts_ramp(grade: int, repetitions: int, interval: int) -> None:
    card = _reviewed(repetitions, 2.5, interval)

    schedule = process_review(card, grade, NOW)

    assert schedule.repetitions == 0
    assert schedule.interval_days == 1
    assert schedule.review_count == card.review_count + 1


def test_failure_updates_easiness_through_formula() -> None:
    schedule = process_review(_reviewed(3, 2.5, 16), 2, NOW)

    # q = 3: 0.1 - 3 * (0.08 + 0.06) = -0.32
    assert schedule.easiness_factor == 2.18


@pytest.mark.parametrize("grade", list(ReviewGrade))
@pytest.mark.parametrize("easiness", [1.3, 1.9, 2.5, 2.95, 3.0])
def test_easiness_stays_within_bounds(grade: ReviewGrade, easiness: float) -> None:
    schedule = process_review(_reviewed(2, easiness, 6), grade, NOW)

    assert MIN_EASINESS_FACTOR <= schedule.easiness_factor <= MAX_EASINESS_FACTOR


def test_perfect_reviews_never_lower_easiness_and_stop_at_cap() -> None:
    card = CardState.new(NOW)
    previous = card.easiness_factor
    now = NOW
    for _ in range(8):
        schedule = process_review(card, ReviewGrade.PERFECT, now)
        assert schedule.easiness_factor >= previous
        previous = schedule.easiness_factor
        for name, value in schedule.fields.items():
            setattr(card, name, value)
        now = schedule.next_review_at

    assert card.easiness_factor == MAX_EASINESS_FACTOR


def test_blackouts_never_raise_easiness() -> None:
    card = _reviewed(5, 3.0, 40)
    previous = card.easiness_factor
    for _ in range(5):
        schedule = process_review(card, ReviewGrade.BLACKOUT, NOW)
        assert schedule.easiness_factor <= previous
        previous = schedule.easiness_factor
        card.easiness_factor = schedule.easiness_factor

    assert card.easiness_factor == MIN_EASINESS_FACTOR


def test_easiness_has_no_floating_point_drift() -> None:
    card = CardState.new(NOW)
    for grade in [4, 5, 3, 4, 4, 5, 3, 4]:
        schedule = process_review(card, grade, NOW)
        for name, value in schedule.fields.items():
            setattr(card, name, value)
        assert card.easiness_factor == round(card.easiness_factor, 2)


def test_process_review_is_pure_and_repeatable() -> None:
    card = _reviewed(2, 2.6, 6)

    first = process_review(card, 4, NOW)
    second = process_review(card, 4, NOW)

    assert first == second
    assert card.repetitions == 2
    assert card.interval_days == 6
    assert card.review_count == 3


@pytest.mark.parametrize("grade", [-1, 6, 2.5, "5", None, True])
def test_invalid_grade_is_rejected(grade: object) -> None:
    with pytest.raises(InvalidGradeError):
        process_review(CardState.new(NOW), grade, NOW)  # type: ignore[arg-type]


def test_initial_state_matches_new_card_defaults() -> None:
    state = initial_state(NOW)

    assert state.repetitions == 0
    assert state.easiness_factor == 2.5
    assert state.interval_days == 1
    assert state.next_review_at == NOW
    assert state.last_reviewed_at is None
    assert state.review_count == 0


def test_preview_intervals_for_each_button() -> None:
    card = _reviewed(2, 2.5, 6)

    preview = preview_intervals(card, NOW)

    assert preview == {
        ReviewGrade.INCORRECT_EASY: 1,
        ReviewGrade.CORRECT_DIFFICULT: 15,
        ReviewGrade.CORRECT_HESITATION: 15,
        ReviewGrade.PERFECT: 15,
    }
    assert card.repetitions == 2


def test_long_perfect_streak_stops_at_interval_ceiling() -> None:
    card = CardState.new(NOW)
    for _ in range(30):
        schedule = process_review(card, ReviewGrade.PERFECT, NOW)
        for name, value in schedule.fields.items():
            setattr(card, name, value)
        assert 1 <= card.interval_days <= MAX_INTERVAL_DAYS

    assert card.interval_days == MAX_INTERVAL_DAYS
    assert card.next_review_at == NOW + timedelta(days=MAX_INTERVAL_DAYS)
