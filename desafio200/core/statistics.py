from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from desafio200.core.models import CompletedSlot, Slot, TOTAL_SLOTS


@dataclass(frozen=True)
class Summary:
    """Derived totals for the challenge at one point in time."""

    completed_count: int
    remaining_count: int
    percent: float
    total_amount: float
    avg_amount: float
    min_amount: Optional[float]
    max_amount: Optional[float]


def _completed(slots: Sequence[Slot]) -> List[CompletedSlot]:
    return [slot for slot in slots if isinstance(slot, CompletedSlot)]


def completed_count(slots: Sequence[Slot]) -> int:
    return len(_completed(slots))


def remaining_count(slots: Sequence[Slot]) -> int:
    return TOTAL_SLOTS - completed_count(slots)


def percent(slots: Sequence[Slot]) -> float:
    """Completion percentage rounded to one decimal place."""
    return round(completed_count(slots) / TOTAL_SLOTS * 100, 1)


def total_amount(slots: Sequence[Slot]) -> float:
    return sum(slot.amount for slot in _completed(slots))


def avg_amount(slots: Sequence[Slot]) -> float:
    done = _completed(slots)
    if not done:
        return 0
    return sum(slot.amount for slot in done) / len(done)


def min_amount(slots: Sequence[Slot]) -> Optional[float]:
    amounts = [slot.amount for slot in _completed(slots)]
    return min(amounts) if amounts else None


def max_amount(slots: Sequence[Slot]) -> Optional[float]:
    amounts = [slot.amount for slot in _completed(slots)]
    return max(amounts) if amounts else None


def summarize(slots: Sequence[Slot]) -> Summary:
    return Summary(
        completed_count=completed_count(slots),
        remaining_count=remaining_count(slots),
        percent=percent(slots),
        total_amount=total_amount(slots),
        avg_amount=avg_amount(slots),
        min_amount=min_amount(slots),
        max_amount=max_amount(slots),
    )
