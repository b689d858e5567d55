"""Configuration helpers for the flashcard scheduler runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_APP_NAME = "Flashcard Scheduler"
DEFAULT_STUDY_MODE = "due"
_STUDY_MODES = {"due", "all"}
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise RuntimeError(f"{name} must be a boolean flag (true/false).")


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    study_mode: str
    study_shuffle: bool
    study_random_seed: Optional[int]

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", DEFAULT_APP_NAME)
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        study_mode = os.getenv("STUDY_MODE", DEFAULT_STUDY_MODE).strip().lower()
        if study_mode not in _STUDY_MODES:
            raise RuntimeError("STUDY_MODE must be either 'due' or 'all'.")

        study_shuffle = _parse_flag("STUDY_SHUFFLE", True)

        raw_seed = os.getenv("STUDY_RANDOM_SEED")
        study_random_seed: Optional[int] = None
        if raw_seed:
            try:
                study_random_seed = int(raw_seed)
            except ValueError as exc:
                raise RuntimeError("STUDY_RANDOM_SEED must be an integer.") from exc

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            study_mode=study_mode,
            study_shuffle=study_shuffle,
            study_random_seed=study_random_seed,
        )
