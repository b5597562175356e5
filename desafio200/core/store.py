from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Tuple, Union

from desafio200.core import statistics
from desafio200.core.errors import (
    InvalidAmount,
    InvalidDate,
    InvalidFile,
    NotCompleted,
    UnknownId,
    ValidationError,
)
from desafio200.core.forecast import Forecast, forecast_completion
from desafio200.core.models import AppState, CompletedSlot, PendingSlot, Slot
from desafio200.core.storage import StatePersistence
from desafio200.core.validation import is_finite_positive, is_valid_iso_date, parse_state

logger = logging.getLogger(__name__)

DateLike = Union[str, date]


def _iso(value: DateLike) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not is_valid_iso_date(value):
        raise InvalidDate(value)
    return value


class DepositStore:
    """Owns the live challenge state.

    Every mutation validates its input, swaps in a new ``AppState`` and then
    writes it through ``persistence``. A rejected call leaves the state as it
    was. Call ``init_from_storage`` once at startup to pick up a saved state.
    """

    def __init__(self, persistence: StatePersistence) -> None:
        self._persistence = persistence
        self._state = AppState.fresh()

    # -- reading ---------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def start_date(self) -> Optional[str]:
        return self._state.start_date

    @property
    def deposits(self) -> Tuple[Slot, ...]:
        return self._state.deposits

    def slot(self, slot_id: int) -> Slot:
        return self._state.deposits[self._index_of(slot_id)]

    @property
    def completed_count(self) -> int:
        return statistics.completed_count(self.deposits)

    @property
    def remaining_count(self) -> int:
        return statistics.remaining_count(self.deposits)

    @property
    def percent(self) -> float:
        return statistics.percent(self.deposits)

    @property
    def total_amount(self) -> float:
        return statistics.total_amount(self.deposits)

    @property
    def avg_amount(self) -> float:
        return statistics.avg_amount(self.deposits)

    @property
    def min_amount(self) -> Optional[float]:
        return statistics.min_amount(self.deposits)

    @property
    def max_amount(self) -> Optional[float]:
        return statistics.max_amount(self.deposits)

    @property
    def summary(self) -> statistics.Summary:
        return statistics.summarize(self.deposits)

    @property
    def completion_forecast(self) -> Forecast:
        return forecast_completion(self.start_date, self.deposits)

    # -- lifecycle -------------------------------------------------------

    def init_from_storage(self) -> bool:
        """Replace the in-memory state with the stored one, if any is usable."""
        stored = self._persistence.load()
        if stored is None:
            return False
        self._state = stored
        logger.info("Loaded %d completed deposits from storage", self.completed_count)
        return True

    def reset_all(self) -> None:
        """Start over: every slot pending, no start date, stored copy erased."""
        self._state = AppState.fresh()
        self._persistence.clear()

    # -- mutations -------------------------------------------------------

    def set_start_date(self, start: Optional[DateLike]) -> None:
        start_iso = None if start is None else _iso(start)
        self._commit(replace(self._state, start_date=start_iso))

    def confirm_deposit(
        self,
        slot_id: int,
        amount: float,
        deposit_date: DateLike,
        note: Optional[str] = None,
    ) -> None:
        """Mark a slot as paid. Overwrites the slot even if it was already paid."""
        completed = self._completed_slot(slot_id, amount, deposit_date, note)
        self._commit_slot(completed)

    def update_deposit(
        self,
        slot_id: int,
        amount: float,
        deposit_date: DateLike,
        note: Optional[str] = None,
    ) -> None:
        """Rewrite amount, date and note of a slot that is already paid."""
        completed = self._completed_slot(slot_id, amount, deposit_date, note)
        if not self.slot(slot_id).done:
            raise NotCompleted(completed.id)
        self._commit_slot(completed)

    def undo_deposit(self, slot_id: int) -> None:
        index = self._index_of(slot_id)
        self._commit_slot(PendingSlot(id=self._state.deposits[index].id))

    # -- import / export -------------------------------------------------

    def export_json(self) -> str:
        return json.dumps(self._state.to_dict(), indent=2, ensure_ascii=False)

    def import_json(self, text: str) -> None:
        try:
            imported = parse_state(text)
        except ValidationError as e:
            raise InvalidFile(e.reasons) from e
        self._commit(imported)

    # -- internals -------------------------------------------------------

    def _index_of(self, slot_id: int) -> int:
        if isinstance(slot_id, int) and not isinstance(slot_id, bool):
            for index, slot in enumerate(self._state.deposits):
                if slot.id == slot_id:
                    return index
        raise UnknownId(slot_id)

    def _completed_slot(
        self,
        slot_id: int,
        amount: float,
        deposit_date: DateLike,
        note: Optional[str],
    ) -> CompletedSlot:
        if not is_finite_positive(amount):
            raise InvalidAmount(amount)
        date_iso = _iso(deposit_date)
        index = self._index_of(slot_id)
        return CompletedSlot(
            id=self._state.deposits[index].id,
            amount=float(amount),
            date=date_iso,
            note=(note or "").strip(),
        )

    def _commit_slot(self, slot: Slot) -> None:
        deposits = list(self._state.deposits)
        deposits[self._index_of(slot.id)] = slot
        self._commit(replace(self._state, deposits=tuple(deposits)))

    def _commit(self, new_state: AppState) -> None:
        self._state = new_state
        self._persistence.save(new_state)
