"""SM-2 scheduling core: grading, scheduling, due-set selection."""

from .formatting import format_interval
from .grades import InvalidGradeError, ReviewGrade, coerce_grade, map_button_to_grade
from .scheduler import ReviewSchedule, initial_state, preview_intervals, process_review
from .selection import (
    DeckStatistics,
    compute_statistics,
    is_due,
    is_new,
    select_due,
    select_due_for_decks,
    shuffle_cards,
)
from .state import CardState, StudyCard

__all__ = [
    "CardState",
    "DeckStatistics",
    "InvalidGradeError",
    "ReviewGrade",
    "ReviewSchedule",
    "StudyCard",
    "coerce_grade",
    "compute_statistics",
    "format_interval",
    "initial_state",
    "is_due",
    "is_new",
    "map_button_to_grade",
    "preview_intervals",
    "process_review",
    "select_due",
    "select_due_for_decks",
    "shuffle_cards",
]
