"""Study session orchestration for the flashcard scheduler."""

from .service import ReviewOutcome, StudyService

__all__ = ["ReviewOutcome", "StudyService"]
