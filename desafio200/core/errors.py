"""Errors raised by the deposit store and the state decoder."""

from __future__ import annotations

from typing import List, Sequence


class DepositError(Exception):
    """Base class for errors raised by store operations."""


class InvalidAmount(DepositError):
    def __init__(self, amount: object) -> None:
        super().__init__(f"Invalid amount: {amount!r} (must be > 0)")
        self.amount = amount


class InvalidDate(DepositError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid date: {value!r} (expected YYYY-MM-DD)")
        self.value = value


class UnknownId(DepositError):
    def __init__(self, slot_id: object) -> None:
        super().__init__(f"Unknown deposit id: {slot_id!r}")
        self.slot_id = slot_id


class NotCompleted(DepositError):
    def __init__(self, slot_id: int) -> None:
        super().__init__(f"Deposit {slot_id} is not completed")
        self.slot_id = slot_id


class InvalidFile(DepositError):
    def __init__(self, reasons: Sequence[str] = ()) -> None:
        detail = "; ".join(reasons[:3])
        super().__init__(f"Invalid file: {detail}" if detail else "Invalid file")
        self.reasons: List[str] = list(reasons)


class ValidationError(ValueError):
    """Raised when a decoded value does not match the persisted state schema."""

    def __init__(self, reasons: Sequence[str]) -> None:
        self.reasons: List[str] = list(reasons)
        super().__init__("; ".join(self.reasons) or "invalid state")
