from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

TOTAL_SLOTS = 200
STORAGE_KEY = "desafio-200-depositos:v1"


@dataclass(frozen=True)
class PendingSlot:
    """A deposit slot that has not been paid yet."""

    id: int

    @property
    def done(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "done": False}


@dataclass(frozen=True)
class CompletedSlot:
    """A paid deposit slot. ``note`` is always a string, empty when unset."""

    id: int
    amount: float
    date: str
    note: str = ""

    @property
    def done(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "done": True,
            "amount": self.amount,
            "date": self.date,
            "note": self.note,
        }


Slot = Union[PendingSlot, CompletedSlot]


def fresh_slots() -> Tuple[Slot, ...]:
    return tuple(PendingSlot(id=i) for i in range(1, TOTAL_SLOTS + 1))


@dataclass(frozen=True)
class AppState:
    """Full snapshot of the challenge: start date plus the 200 slots."""

    start_date: Optional[str]
    deposits: Tuple[Slot, ...]

    @classmethod
    def fresh(cls) -> "AppState":
        return cls(start_date=None, deposits=fresh_slots())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startDate": self.start_date,
            "deposits": [slot.to_dict() for slot in self.deposits],
        }
