"""Bootstrap logic for the flashcard scheduler."""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.app.settings import AppSettings
from src.db import get_engine, get_session_factory, run_migrations_if_needed
from src.db.decks import list_decks
from src.study import StudyService


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


def build_study_service(
    settings: AppSettings,
    session_factory: async_sessionmaker[AsyncSession],
) -> StudyService:
    """Create the study service configured from ``settings``."""
    rng = random.Random(settings.study_random_seed) if settings.study_random_seed is not None else None
    return StudyService(
        session_factory,
        mode=settings.study_mode,
        shuffle=settings.study_shuffle,
        rng=rng,
    )


async def log_dashboard(
    service: StudyService,
    session_factory: async_sessionmaker[AsyncSession],
    now: Optional[datetime] = None,
) -> int:
    """Log per-deck card counts and return the number of cards ready to study."""
    if now is None:
        now = datetime.now(timezone.utc)

    async with session_factory() as session:
        decks = await list_decks(session)

    ready = 0
    for deck in decks:
        stats = await service.deck_statistics(deck.id, now)
        ready += stats.due
        LOGGER.info(
            "Deck %s (%s): total=%d new=%d learning=%d mature=%d due=%d",
            deck.id,
            deck.name,
            stats.total,
            stats.new,
            stats.learning,
            stats.mature,
            stats.due,
        )
    return ready


def run_app(settings: AppSettings) -> None:
    """Prepare the database and log what is ready to study."""
    _configure_logging(settings.log_level)
    print(f"{settings.app_name} is running in {settings.app_env} mode.")

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    session_factory = get_session_factory()
    service = build_study_service(settings, session_factory)

    async def _startup_report() -> int:
        try:
            return await log_dashboard(service, session_factory)
        finally:
            await get_engine().dispose()

    ready = asyncio.run(_startup_report())
    LOGGER.info("%d card(s) ready to study in %s mode.", ready, service.mode)
