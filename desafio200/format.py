"""pt-BR display helpers for the UI layer."""

from __future__ import annotations

from datetime import date


def format_brl(value: float) -> str:
    """Format a value as Brazilian reais, e.g. ``R$ 1.234,56``."""
    sign = "-" if value < 0 else ""
    # format with US separators, then swap them
    text = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def format_date_br(date_iso: str) -> str:
    """Turn ``YYYY-MM-DD`` into ``DD/MM/YYYY``; anything unparseable is returned as is."""
    try:
        y, m, d = (int(part) for part in date_iso.split("-"))
        parsed = date(y, m, d)
    except (AttributeError, ValueError):
        return date_iso
    return f"{parsed.day:02d}/{parsed.month:02d}/{parsed.year:04d}"


def today_iso() -> str:
    return date.today().isoformat()


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))
