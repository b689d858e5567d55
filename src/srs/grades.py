"""Review grades and the adapters that turn UI input into them."""

from __future__ import annotations

from enum import IntEnum


SUCCESS_THRESHOLD = 3
BUTTONS = ("hard", "medium", "easy")


class InvalidGradeError(ValueError):
    """Raised when a grade falls outside the 0-5 review scale."""


class ReviewGrade(IntEnum):
    """Six-point recall quality scale used by SM-2."""

    BLACKOUT = 0
    INCORRECT_REMEMBERED = 1
    INCORRECT_EASY = 2
    CORRECT_DIFFICULT = 3
    CORRECT_HESITATION = 4
    PERFECT = 5

    @property
    def is_success(self) -> bool:
        return self >= SUCCESS_THRESHOLD


_BUTTON_GRADES = {
    "hard": ReviewGrade.CORRECT_DIFFICULT,
    "medium": ReviewGrade.CORRECT_HESITATION,
    "easy": ReviewGrade.PERFECT,
}


def coerce_grade(value: object) -> ReviewGrade:
    """Validate a raw grade and return it as a ``ReviewGrade``."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidGradeError(f"Grade must be an integer between 0 and 5, got {value!r}.")
    try:
        return ReviewGrade(value)
    except ValueError as exc:
        raise InvalidGradeError(f"Grade must be between 0 and 5, got {value}.") from exc


def map_button_to_grade(button: str, was_correct: bool) -> ReviewGrade:
    """Collapse the three-button answer UI onto the six-point scale.

    Any incorrect answer maps to ``INCORRECT_EASY`` (2) regardless of the
    button pressed; correct answers map hard/medium/easy to 3/4/5.
    """
    normalized = button.strip().lower() if isinstance(button, str) else button
    if normalized not in _BUTTON_GRADES:
        raise InvalidGradeError(f"Unknown review button {button!r}; expected one of {', '.join(BUTTONS)}.")
    if not was_correct:
        return ReviewGrade.INCORRECT_EASY
    return _BUTTON_GRADES[normalized]
