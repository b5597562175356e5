"""Tests for desafio200.core.validation – schema checks for stored/imported state."""

from __future__ import annotations

import json

import pytest

from desafio200.core.errors import ValidationError
from desafio200.core.models import CompletedSlot, PendingSlot
from desafio200.core.validation import (
    decode_state,
    deposit_item_errors,
    is_finite_positive,
    is_valid_deposit_item,
    is_valid_iso_date,
    is_valid_state,
    parse_state,
    state_errors,
)


def _raw_state(start_date=None, deposits=None) -> dict:
    if deposits is None:
        deposits = [{"id": i, "done": False} for i in range(1, 201)]
    return {"startDate": start_date, "deposits": deposits}


def _done(slot_id: int, amount=10.0, date="2026-01-01", **extra) -> dict:
    item = {"id": slot_id, "done": True, "amount": amount, "date": date}
    item.update(extra)
    return item


# ---------------------------------------------------------------------------
# is_valid_iso_date
# ---------------------------------------------------------------------------

class TestIsValidIsoDate:
    def test_accepts_iso_date(self):
        assert is_valid_iso_date("2026-01-29")

    def test_does_not_check_calendar(self):
        assert is_valid_iso_date("2024-13-99")

    @pytest.mark.parametrize(
        "value",
        [
            "2026-1-29", "26-01-29", "2026/01/29", "2026-01-29T00:00", " 2026-01-29", "2026-01-29\n", "", None, 20260129,
            "\u0662\u0660\u0662\u0666-\u0660\u0661-\u0660\u0661",
            "\uff12\uff10\uff12\uff16-\uff10\uff11-\uff10\uff11",
        ],
    )
    def test_rejects_other_shapes(self, value):
        assert not is_valid_iso_date(value)


# ---------------------------------------------------------------------------
# is_finite_positive
# ---------------------------------------------------------------------------

class TestIsFinitePositive:
    def test_positive_numbers(self):
        assert is_finite_positive(1)
        assert is_finite_positive(0.01)

    @pytest.mark.parametrize("value", [0, -1, float("nan"), float("inf"), True, "10", None])
    def test_rejects(self, value):
        assert not is_finite_positive(value)


# ---------------------------------------------------------------------------
# deposit items
# ---------------------------------------------------------------------------

class TestDepositItem:
    def test_pending_item(self):
        assert is_valid_deposit_item({"id": 1, "done": False})

    def test_pending_item_ignores_leftover_fields(self):
        assert is_valid_deposit_item({"id": 1, "done": False, "amount": "junk"})

    def test_completed_item(self):
        assert is_valid_deposit_item(_done(5, note="primeiro"))

    def test_completed_item_note_optional(self):
        assert is_valid_deposit_item(_done(5))
        assert is_valid_deposit_item(_done(5, note=None))

    def test_not_an_object(self):
        assert deposit_item_errors([1, True]) == ["deposit: expected an object"]

    @pytest.mark.parametrize("slot_id", [0, 201, -3, "1", None, True])
    def test_id_out_of_range_or_wrong_type(self, slot_id):
        assert not is_valid_deposit_item({"id": slot_id, "done": False})

    def test_done_must_be_bool(self):
        errors = deposit_item_errors({"id": 1, "done": 1})
        assert errors == ["deposit.done: must be a boolean"]

    @pytest.mark.parametrize("amount", [0, -5, None, "10", float("nan")])
    def test_completed_bad_amount(self, amount):
        assert not is_valid_deposit_item(_done(1, amount=amount))

    def test_completed_missing_date(self):
        item = {"id": 1, "done": True, "amount": 10}
        assert deposit_item_errors(item, "deposits[0]") == [
            "deposits[0].date: must be a YYYY-MM-DD string"
        ]

    def test_completed_note_wrong_type(self):
        assert not is_valid_deposit_item(_done(1, note=42))

    def test_collects_every_reason(self):
        errors = deposit_item_errors({"id": 999, "done": True}, "x")
        assert len(errors) == 3
        assert errors[0].startswith("x.id")


# ---------------------------------------------------------------------------
# whole state
# ---------------------------------------------------------------------------

class TestState:
    def test_fresh_state_is_valid(self):
        assert is_valid_state(_raw_state())

    def test_with_start_date(self):
        assert is_valid_state(_raw_state(start_date="2026-01-01"))

    def test_bad_start_date(self):
        assert state_errors(_raw_state(start_date="01/01/2026")) == [
            "startDate: must be null or a YYYY-MM-DD string"
        ]

    def test_missing_start_date_key_counts_as_null(self):
        raw = _raw_state()
        del raw["startDate"]
        assert is_valid_state(raw)

    @pytest.mark.parametrize("count", [0, 199, 201])
    def test_wrong_deposit_count(self, count):
        deposits = [{"id": (i % 200) + 1, "done": False} for i in range(count)]
        errors = state_errors(_raw_state(deposits=deposits))
        assert errors == [f"deposits: expected 200 entries, got {count}"]

    def test_deposits_not_a_list(self):
        assert not is_valid_state({"startDate": None, "deposits": {"1": {}}})

    @pytest.mark.parametrize("value", [None, [], "state", 3])
    def test_not_an_object(self, value):
        assert not is_valid_state(value)

    def test_completed_entry_missing_date(self):
        raw = _raw_state()
        raw["deposits"][9] = {"id": 10, "done": True, "amount": 50}
        assert not is_valid_state(raw)

    def test_duplicate_ids_rejected(self):
        raw = _raw_state()
        raw["deposits"][5] = {"id": 5, "done": False}
        errors = state_errors(raw)
        assert errors == ["deposits[5].id: expected 6, got 5"]

    def test_out_of_order_ids_rejected(self):
        raw = _raw_state()
        raw["deposits"][0], raw["deposits"][1] = raw["deposits"][1], raw["deposits"][0]
        assert len(state_errors(raw)) == 2

    def test_item_errors_carry_index(self):
        raw = _raw_state()
        raw["deposits"][42] = {"id": 43, "done": "yes"}
        assert state_errors(raw) == ["deposits[42].done: must be a boolean"]


# ---------------------------------------------------------------------------
# decode_state / parse_state
# ---------------------------------------------------------------------------

class TestDecode:
    def test_decodes_typed_slots(self):
        raw = _raw_state(start_date="2026-01-01")
        raw["deposits"][0] = _done(1, amount=100, note="  ")
        raw["deposits"][1] = _done(2, amount=2.5, note="café")
        state = decode_state(raw)
        assert state.start_date == "2026-01-01"
        assert state.deposits[0] == CompletedSlot(id=1, amount=100.0, date="2026-01-01", note="  ")
        assert state.deposits[1].note == "café"
        assert state.deposits[2] == PendingSlot(id=3)
        assert len(state.deposits) == 200

    def test_null_note_becomes_empty(self):
        raw = _raw_state()
        raw["deposits"][0] = _done(1, note=None)
        assert decode_state(raw).deposits[0].note == ""

    def test_pending_leftovers_dropped(self):
        raw = _raw_state()
        raw["deposits"][0] = {"id": 1, "done": False, "amount": 5, "date": "2026-01-01"}
        assert decode_state(raw).deposits[0] == PendingSlot(id=1)

    def test_float_ids_become_int(self):
        raw = _raw_state()
        raw["deposits"][3] = {"id": 4.0, "done": False}
        slot = decode_state(raw).deposits[3]
        assert slot.id == 4 and isinstance(slot.id, int)

    def test_decode_raises_with_reasons(self):
        with pytest.raises(ValidationError) as exc_info:
            decode_state({"startDate": 5, "deposits": []})
        assert len(exc_info.value.reasons) == 2

    def test_parse_valid_text(self):
        text = json.dumps(_raw_state())
        assert len(parse_state(text).deposits) == 200

    @pytest.mark.parametrize("text", ["", "not json", "{", "null", "[]"])
    def test_parse_invalid_text(self, text):
        with pytest.raises(ValidationError):
            parse_state(text)

    def test_parse_deeply_nested_text(self):
        with pytest.raises(ValidationError):
            parse_state("[" * 200000)

    def test_parse_rejects_nan_literal(self):
        text = json.dumps(_raw_state()).replace('"done": false}', '"done": false, "x": NaN}', 1)
        with pytest.raises(ValidationError):
            parse_state(text)
