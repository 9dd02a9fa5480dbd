"""Small builders shared by the test modules."""

from __future__ import annotations

from datetime import date


def d(day: int, month: int = 6) -> date:
    """Day ``day`` of June 2025 unless another month is given."""
    return date(2025, month, day)
