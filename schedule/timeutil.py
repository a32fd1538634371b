"""Hilfsfunktionen für "HH:MM"-Uhrzeiten.

Uhrzeiten werden intern als Minuten seit Mitternacht gerechnet. Addition
läuft modulo 24 h (wie eine Uhr), es gibt keinen Tageswechsel.
"""

from datetime import datetime
from typing import Optional

MINUTES_PER_DAY = 24 * 60


def parse_hhmm(raw: Optional[str]) -> Optional[int]:
    """Parst "HH:MM" → Minuten seit Mitternacht; None bei leer/ungültig."""
    if raw is None:
        return None
    raw = str(raw).strip()
    if not raw:
        return None
    try:
        t = datetime.strptime(raw, "%H:%M")
    except ValueError:
        return None
    return t.hour * 60 + t.minute


def format_hhmm(minutes: int) -> str:
    """Minuten seit Mitternacht → "HH:MM" (modulo 24 h)."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(hhmm: str, delta: int) -> str:
    """Addiert delta Minuten auf eine gültige "HH:MM"-Zeit."""
    base = parse_hhmm(hhmm)
    if base is None:
        raise ValueError(f"Ungültige Uhrzeit: {hhmm!r}")
    return format_hhmm(base + delta)


def normalize_hhmm(raw: Optional[str]) -> Optional[str]:
    """"8:5" → "08:05"; None bei ungültiger Eingabe."""
    minutes = parse_hhmm(raw)
    return None if minutes is None else format_hhmm(minutes)


def sort_key(hhmm: str) -> int:
    """Sortierschlüssel; ungültige Zeiten landen am Ende."""
    minutes = parse_hhmm(hhmm)
    return MINUTES_PER_DAY if minutes is None else minutes
