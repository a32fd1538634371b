"""Renderer für die Terminal-Anzeige des Rasters (cmd_show)."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.snapshot import Snapshot


def render_overview_rows(snapshot: "Snapshot") -> list[list[str]]:
    """Gibt Tabellenzeilen für die Gesamtübersicht zurück.

    Jede Zeile: [block_nr, zeit, Raum 1, Raum 2, ...]. Freie Zellen: '—'.
    """
    from export.helpers import build_grid, format_session

    rows: list[list[str]] = []
    for (label, cells), block in zip(build_grid(snapshot), snapshot.blocks):
        rows.append(
            [str(block.id), label] + [format_session(s) or "—" for s in cells]
        )
    return rows


def render_classroom_rows(snapshot: "Snapshot", classroom_id: int) -> list[list[str]]:
    """Gibt Tabellenzeilen für einen einzelnen Raum zurück.

    Jede Zeile: [zeit, titel, vortragende, beschreibung].
    """
    if snapshot.classroom(classroom_id) is None:
        return []
    rows: list[list[str]] = []
    for s in snapshot.sessions_for(classroom_id):
        rows.append([
            f"{s.start_time}–{s.end_time}",
            s.title or "—",
            s.presenter or "—",
            s.description,
        ])
    return rows
