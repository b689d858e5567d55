from __future__ import annotations

import pytest

from src.srs.formatting import format_interval


@pytest.mark.parametrize(
    "days,expected",
    [
        (0.5, "12h"),
        (1 / 24, "1h"),
        (1, "1d"),
        (3, "3d"),
        (29, "29d"),
        (30, "1mo"),
        (60, "2mo"),
        (364, "12mo"),
        (365, "1y"),
        (400, "1y"),
        (1000, "3y"),
    ],
)
def test_format_interval(days: float, expected: str) -> None:
    assert format_interval(days) == expected
