"""Human-readable rendering of review intervals."""

from __future__ import annotations

from .scheduler import round_half_up


DAYS_PER_MONTH = 30.44
DAYS_PER_YEAR = 365.25


def format_interval(days: float) -> str:
    """Render a day count as ``12h``, ``3d``, ``2mo`` or ``1y``."""
    if days < 1:
        return f"{int(round_half_up(days * 24))}h"
    if days < 30:
        return f"{int(round_half_up(days))}d"
    if days < 365:
        return f"{int(round_half_up(days / DAYS_PER_MONTH))}mo"
    return f"{int(round_half_up(days / DAYS_PER_YEAR))}y"
