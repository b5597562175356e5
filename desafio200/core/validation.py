"""Schema checks for persisted or imported challenge state.

Everything here accepts arbitrary decoded JSON and never raises, except the
``decode_state``/``parse_state`` entry points which raise ``ValidationError``
with the collected reasons.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, List

from desafio200.core.errors import ValidationError
from desafio200.core.models import AppState, CompletedSlot, PendingSlot, Slot, TOTAL_SLOTS

_ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def is_finite_positive(v: Any) -> bool:
    """True for real numbers > 0. Rejects bools, NaN and infinities."""
    return _is_number(v) and math.isfinite(v) and v > 0


def is_valid_iso_date(v: Any) -> bool:
    """True for ``YYYY-MM-DD`` shaped strings. The calendar is not checked."""
    return isinstance(v, str) and _ISO_DATE_RE.fullmatch(v) is not None


def deposit_item_errors(v: Any, path: str = "deposit") -> List[str]:
    if not isinstance(v, dict):
        return [f"{path}: expected an object"]
    errors: List[str] = []
    slot_id = v.get("id")
    if not _is_number(slot_id) or not (1 <= slot_id <= TOTAL_SLOTS):
        errors.append(f"{path}.id: must be a number between 1 and {TOTAL_SLOTS}")
    done = v.get("done")
    if not isinstance(done, bool):
        errors.append(f"{path}.done: must be a boolean")
    elif done:
        amount = v.get("amount")
        if not is_finite_positive(amount):
            errors.append(f"{path}.amount: must be a finite number > 0")
        if not is_valid_iso_date(v.get("date")):
            errors.append(f"{path}.date: must be a YYYY-MM-DD string")
        note = v.get("note")
        if note is not None and not isinstance(note, str):
            errors.append(f"{path}.note: must be a string")
    return errors


def is_valid_deposit_item(v: Any) -> bool:
    return not deposit_item_errors(v)


def state_errors(v: Any) -> List[str]:
    """Return every reason ``v`` is not a valid state; empty when valid."""
    if not isinstance(v, dict):
        return ["state: expected an object"]
    errors: List[str] = []
    start_date = v.get("startDate")
    if start_date is not None and not is_valid_iso_date(start_date):
        errors.append("startDate: must be null or a YYYY-MM-DD string")

    deposits = v.get("deposits")
    if not isinstance(deposits, list):
        errors.append("deposits: expected a list")
        return errors
    if len(deposits) != TOTAL_SLOTS:
        errors.append(f"deposits: expected {TOTAL_SLOTS} entries, got {len(deposits)}")
        return errors

    item_errors: List[str] = []
    for i, item in enumerate(deposits):
        item_errors.extend(deposit_item_errors(item, f"deposits[{i}]"))
    errors.extend(item_errors)
    if item_errors:
        return errors

    # Slot i must sit at position i-1; this also rules out duplicate ids.
    for i, item in enumerate(deposits):
        if item["id"] != i + 1:
            errors.append(f"deposits[{i}].id: expected {i + 1}, got {item['id']!r}")
    return errors


def is_valid_state(v: Any) -> bool:
    return not state_errors(v)


def _decode_slot(item: dict) -> Slot:
    slot_id = int(item["id"])
    if not item["done"]:
        return PendingSlot(id=slot_id)
    return CompletedSlot(
        id=slot_id,
        amount=float(item["amount"]),
        date=item["date"],
        note=item.get("note") or "",
    )


def decode_state(v: Any) -> AppState:
    """Turn an untrusted decoded value into an ``AppState``."""
    errors = state_errors(v)
    if errors:
        raise ValidationError(errors)
    return AppState(
        start_date=v.get("startDate"),
        deposits=tuple(_decode_slot(item) for item in v["deposits"]),
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_state(text: str) -> AppState:
    """Parse JSON text and decode it. Raises ``ValidationError`` on any failure."""
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError) as e:
        raise ValidationError([f"not valid JSON: {e}"]) from e
    return decode_state(raw)

