"""Import eines Veranstaltungsprogramms aus JSON.

Erwartetes Format (Ausgabe von data.csv_import):

    {
      "event": "...", "location": "...",
      "sessions": [
        {"time_slot": "9:25AM - 10:10AM", "room": "Glacier North",
         "title": "...", "description": "...", "speakers": ["..."],
         "presenter": "..."}
      ]
    }

Räume werden in der Reihenfolge ihres ersten Auftretens zu Räumen 1..N,
Zeitfenster chronologisch zu Blöcken 1..M. Jeder Raum erhält pro Block
genau eine Session (leer, wenn das Programm nichts vorsieht).
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from config.schema import ScheduleDefaults
from models.block import Block
from models.classroom import Classroom
from models.session import Session
from schedule.timeutil import format_hhmm

logger = logging.getLogger(__name__)


class JsonImportError(Exception):
    """Fehler beim JSON-Import."""


_TIME_RE = re.compile(r"(\d{1,2})(?::(\d{2}))?\s*([AaPp][Mm])")
_EMPTY_MARKERS = {"", "tbd", "tba"}


class ImportedSchedule(BaseModel):
    """Ergebnis des Imports, bereit für ScheduleCache.load_imported()."""

    event: str = ""
    location: str = ""
    classrooms: list[Classroom]
    blocks: list[Block]
    sessions: dict[int, list[Session]]
    skipped: list[str] = []

    @property
    def filled_sessions(self) -> int:
        return sum(1 for lst in self.sessions.values() for s in lst if not s.is_empty)

    def summary(self) -> str:
        lines = [
            f"Veranstaltung: {self.event or '—'}",
            f"Ort: {self.location or '—'}",
            f"Räume: {len(self.classrooms)}",
            f"Blöcke: {len(self.blocks)}",
            f"Sessions mit Inhalt: {self.filled_sessions}",
            f"Übersprungen: {len(self.skipped)}" if self.skipped else "",
        ]
        return "\n".join(l for l in lines if l)


def _clean(value) -> str:
    """Trimmt Strings; leere Werte und Platzhalter wie "TBD" → ""."""
    if value is None:
        return ""
    s = str(value).strip()
    return "" if s.lower() in _EMPTY_MARKERS else s


def _to_minutes(hour: str, minute: Optional[str], ampm: str) -> int:
    h = int(hour) % 12
    if ampm.upper() == "PM":
        h += 12
    return h * 60 + int(minute or 0)


def parse_time_slot(raw: str, session_length: int) -> Optional[tuple[int, int]]:
    """Parst "9:25AM - 10:10AM" → (Beginn, Ende) in Minuten.

    Nur eine Uhrzeit ("9AM") → Ende = Beginn + session_length.
    Keine erkennbare Uhrzeit → None.
    """
    matches = _TIME_RE.findall(raw or "")
    if not matches:
        return None
    start = _to_minutes(*matches[0])
    if len(matches) > 1:
        end = _to_minutes(*matches[1])
    else:
        end = start + session_length
    return start, end


def load_event_json(path: Path) -> dict:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except OSError as e:
        raise JsonImportError(f"Datei nicht lesbar: {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise JsonImportError(f"Ungültiges JSON in {path}: {e}") from e
    if not isinstance(payload, dict) or not isinstance(payload.get("sessions"), list):
        raise JsonImportError(f"{path}: Schlüssel 'sessions' (Liste) fehlt")
    return payload


def build_schedule(payload: dict, defaults: ScheduleDefaults) -> ImportedSchedule:
    """Baut Räume, Blöcke und Sessions aus einem geladenen Programm."""
    skipped: list[str] = []
    rooms: list[str] = []
    slots: set[tuple[int, int]] = set()
    entries: list[tuple[str, tuple[int, int], dict]] = []

    for i, raw in enumerate(payload["sessions"], 1):
        if not isinstance(raw, dict):
            skipped.append(f"Eintrag {i}: kein Objekt")
            continue
        room = _clean(raw.get("room"))
        slot = parse_time_slot(str(raw.get("time_slot") or ""),
                               defaults.session_length_minutes)
        if not room or slot is None:
            skipped.append(
                f"Eintrag {i} ({_clean(raw.get('title')) or 'ohne Titel'}): "
                f"Raum oder Zeitfenster fehlt")
            continue
        if room not in rooms:
            rooms.append(room)
        slots.add(slot)
        entries.append((room, slot, raw))

    if not entries:
        raise JsonImportError("Keine importierbaren Sessions gefunden")
    if len(rooms) > defaults.max_classrooms:
        raise JsonImportError(
            f"{len(rooms)} Räume im Programm, erlaubt sind höchstens {defaults.max_classrooms}")
    if len(slots) > defaults.max_blocks:
        raise JsonImportError(
            f"{len(slots)} Zeitfenster im Programm, erlaubt sind höchstens {defaults.max_blocks}")

    ordered_slots = sorted(slots)
    slot_index = {slot: idx for idx, slot in enumerate(ordered_slots)}
    room_ids = {name: cid for cid, name in enumerate(rooms, 1)}

    blocks = [
        Block(id=idx + 1, start_time=format_hhmm(start), end_time=format_hhmm(end))
        for idx, (start, end) in enumerate(ordered_slots)
    ]

    cells: dict[tuple[int, int], dict] = {}
    for room, slot, raw in entries:
        key = (room_ids[room], slot_index[slot])
        if key in cells:
            skipped.append(
                f"{room} {format_hhmm(slot[0])}: doppelt belegt, "
                f"'{_clean(raw.get('title'))}' übersprungen")
            continue
        cells[key] = raw

    sessions: dict[int, list[Session]] = {}
    for cid in room_ids.values():
        row = []
        for idx, block in enumerate(blocks):
            raw = cells.get((cid, idx), {})
            speakers = raw.get("speakers") or []
            if isinstance(speakers, str):
                speakers = [speakers]
            speakers = [_clean(s) for s in speakers]
            presenter = _clean(raw.get("presenter")) or ", ".join(s for s in speakers if s)
            row.append(Session(
                classroom_id=cid,
                start_time=block.start_time,
                end_time=block.end_time,
                title=_clean(raw.get("title")),
                presenter=presenter,
                description=_clean(raw.get("description")),
            ))
        sessions[cid] = row

    for msg in skipped:
        logger.warning(f"JSON-Import: {msg}")

    return ImportedSchedule(
        event=_clean(payload.get("event")),
        location=_clean(payload.get("location")),
        classrooms=[Classroom(id=cid, name=name) for name, cid in room_ids.items()],
        blocks=blocks,
        sessions=sessions,
        skipped=skipped,
    )


def import_from_json(path: Path, defaults: ScheduleDefaults) -> ImportedSchedule:
    """Lädt und verarbeitet eine Programmdatei; wirft JsonImportError."""
    return build_schedule(load_event_json(path), defaults)
