"""Gemeinsame Hilfsfunktionen für Terminal-, Excel- und PDF-Export."""

from datetime import date

from models.session import Session
from models.snapshot import Snapshot

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "session": "B3D4FF",
    "free":    "F5F5F5",
    "header":  "4472C4",
    "time":    "E0E0E0",
}


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def format_session(session: Session | None, with_description: bool = False) -> str:
    """Zelltext: Titel, Vortragende und optional Beschreibung, zeilenweise."""
    if session is None or session.is_empty:
        return ""
    parts = [session.title or "(ohne Titel)"]
    if session.presenter:
        parts.append(session.presenter)
    if with_description and session.description:
        parts.append(session.description)
    return "\n".join(parts)


def session_at(snapshot: Snapshot, classroom_id: int, block_index: int) -> Session | None:
    """Session eines Raums im Block mit Index block_index (0-basiert)."""
    return snapshot.cell(classroom_id, block_index)


def build_grid(snapshot: Snapshot) -> list[tuple[str, list[Session | None]]]:
    """Zeilen des Übersichtsrasters: (Zeit-Label, [Session je Raum])."""
    return [
        (block.label, [session_at(snapshot, c.id, idx) for c in snapshot.classrooms])
        for idx, block in enumerate(snapshot.blocks)
    ]
