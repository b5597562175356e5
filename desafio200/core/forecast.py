"""Completion forecast based on average deposit throughput.

The rate is the number of dated deposits divided by the number of days
between the earliest and latest of them (at least one day). The remaining
slots are projected forward from the latest deposit at that rate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from desafio200.core.models import CompletedSlot, Slot
from desafio200.core.statistics import remaining_count

REASON_NO_START_DATE = "start date not set"
REASON_TOO_FEW_DEPOSITS = "need at least 2 dated deposits"
REASON_INSUFFICIENT_DATA = "insufficient data"


@dataclass(frozen=True)
class Forecast:
    possible: bool
    deposits_per_day: Optional[float] = None
    eta_iso: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def impossible(cls, reason: str) -> "Forecast":
        return cls(possible=False, reason=reason)


def _calendar_date(date_iso: str) -> date:
    """Parse ``YYYY-MM-DD``, rolling days 29-31 past the end of a short month.

    ``2026-02-30`` becomes 2026-03-02. Months outside 1-12 and days outside
    1-31 raise ``ValueError``.
    """
    y, m, d = (int(part) for part in date_iso.split("-"))
    if not 1 <= d <= 31:
        raise ValueError(f"day out of range: {date_iso}")
    return date(y, m, 1) + timedelta(days=d - 1)


def forecast_completion(start_date: Optional[str], slots: Sequence[Slot]) -> Forecast:
    """Estimate the completion date. Never raises."""
    dated = [slot for slot in slots if isinstance(slot, CompletedSlot) and slot.date]
    if not start_date:
        return Forecast.impossible(REASON_NO_START_DATE)
    if len(dated) < 2:
        return Forecast.impossible(REASON_TOO_FEW_DEPOSITS)

    # ISO dates sort chronologically as strings
    dates = sorted(slot.date for slot in dated)
    try:
        first = _calendar_date(dates[0])
        last = _calendar_date(dates[-1])
    except ValueError:
        # shape-valid but not a calendar date, e.g. 2024-13-99
        return Forecast.impossible(REASON_INSUFFICIENT_DATA)

    diff_days = max(1, (last - first).days)
    deposits_per_day = len(dated) / diff_days
    if not math.isfinite(deposits_per_day) or deposits_per_day <= 0:
        return Forecast.impossible(REASON_INSUFFICIENT_DATA)

    days_to_finish = math.ceil(remaining_count(slots) / deposits_per_day)
    try:
        eta = last + timedelta(days=days_to_finish)
    except OverflowError:
        return Forecast.impossible(REASON_INSUFFICIENT_DATA)

    return Forecast(possible=True, deposits_per_day=deposits_per_day, eta_iso=eta.isoformat())
