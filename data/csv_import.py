"""CSV→JSON-Konverter für Programm-Tabellen im Rundenformat.

Aufbau der Tabelle (eine Zeile pro Runde, Räume als Spalten ab Spalte 3):

    9:25AM - 10:10AM, Round 1, <Titel Raum 1>, <Titel Raum 2>, ...
    ,               ,          <Beschreibung 1>, <Beschreibung 2>, ...
    ,               ,          <Vortragende 1>,  <Vortragende 2>, ...

Beschreibungs- und Vortragenden-Zeile sind optional und werden nur
erkannt, wenn ihre ersten beiden Spalten leer sind. Zeilen mit Uhrzeit,
deren zweite Spalte keine Runde ist, sind übergreifende Programmpunkte
(Begrüßung, Check-in, …); Spalte 4 nennt dann optional den Ort.

Das Ergebnis hat das Format, das data.json_import erwartet.
"""

import csv
import json
import logging
import re
from pathlib import Path

from config.schema import ScheduleDefaults
from data.json_import import ImportedSchedule, build_schedule

logger = logging.getLogger(__name__)


class CsvImportError(Exception):
    """Fehler beim CSV-Import."""


DEFAULT_ROOMS = (
    "Voyageurs South",
    "Voyageurs North",
    "Glacier South",
    "Glacier North",
    "Cascade",
    "Theater",
    "Gallery",
    "Alumni Room",
    "Mississippi",
    "Valhalla",
)

VARIOUS_SPEAKERS = "Various / Panel"
VARIOUS_ROOM = "Various / See description"

_TIME_RE = re.compile(r"\d{1,2}:\d{2}[AP]M|\d{1,2}[AP]M")
_SPEAKER_SPLIT_RE = re.compile(r"[,&/]")
# Jahreszahlen sind keine Teamnummern
_NOT_TEAMS = {"2024", "2025"}
# Folgezeilen einer Runde: mindestens so viele Spalten
_MIN_DETAIL_COLUMNS = 12


# ─── Vortragende ──────────────────────────────────────────────────────────────

def _is_team_number(token: str) -> bool:
    return len(token) >= 4 and token.isdigit() and token not in _NOT_TEAMS


def parse_speakers(raw: str) -> list[str]:
    """Zerlegt eine Vortragenden-Zelle an , & / in einzelne Namen.

    "4607"          → "Team 4607"
    "Amy K 4728"    → "Amy K (Team 4728)"
    leer, "various" → ["Various / Panel"]
    """
    raw = (raw or "").strip()
    if not raw or raw.lower() == "various":
        return [VARIOUS_SPEAKERS]

    result = []
    for part in _SPEAKER_SPLIT_RE.split(raw):
        part = part.strip()
        if not part:
            continue
        if _is_team_number(part):
            result.append(f"Team {part}")
            continue
        fields = part.split()
        if len(fields) > 1 and len(fields[-1]) >= 4 and fields[-1].isdigit():
            result.append(f"{' '.join(fields[:-1])} (Team {fields[-1]})")
            continue
        result.append(part)
    return result or [VARIOUS_SPEAKERS]


# ─── Zeilen ───────────────────────────────────────────────────────────────────

def _is_detail_row(row: list[str]) -> bool:
    return len(row) >= _MIN_DETAIL_COLUMNS and row[0] == "" and row[1] == ""


def _session(time_slot: str, room: str, title: str, description: str,
             speakers: list[str], round_name: str = "") -> dict:
    entry = {
        "time_slot": time_slot,
        "room": room,
        "title": title,
        "description": description,
        "speakers": speakers,
        "presenter": ", ".join(speakers) or "TBD",
    }
    if round_name:
        entry["round"] = round_name
    return entry


def parse_rows(rows: list[list[str]], rooms=DEFAULT_ROOMS) -> list[dict]:
    """Wandelt die Tabellenzeilen in Session-Einträge um."""
    sessions: list[dict] = []
    i = 0
    while i < len(rows):
        row = rows[i]
        i += 1
        if len(row) < 3:
            continue
        time_slot = row[0].strip()
        if not _TIME_RE.search(time_slot) or not row[1]:
            continue

        if "round" not in row[1].lower():
            title = row[1].strip()
            room = row[3].strip() if len(row) > 3 and row[3].strip() else VARIOUS_ROOM
            sessions.append(_session(time_slot, room, title, title, parse_speakers("")))
            continue

        round_name = row[1].strip()
        descriptions: list[str] = []
        speakers_raw: list[str] = []
        if i < len(rows) and _is_detail_row(rows[i]):
            descriptions = rows[i][2:]
            i += 1
        if i < len(rows) and _is_detail_row(rows[i]):
            speakers_raw = rows[i][2:]
            i += 1

        titles = row[2:]
        for j, room in enumerate(rooms):
            if j >= len(titles) or not titles[j].strip():
                continue
            description = descriptions[j].strip() if j < len(descriptions) else ""
            speaker = speakers_raw[j].strip() if j < len(speakers_raw) else ""
            sessions.append(_session(time_slot, room, titles[j].strip(), description,
                                     parse_speakers(speaker), round_name))
    return sessions


def read_rows(path: Path) -> list[list[str]]:
    """Liest die CSV-Datei; Zeilen, die mit # beginnen, sind Kommentare."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            lines = [line for line in f if not line.startswith("#")]
    except OSError as e:
        raise CsvImportError(f"Datei nicht lesbar: {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise CsvImportError(f"{path}: keine UTF-8-Datei: {e}") from e
    try:
        return list(csv.reader(lines))
    except csv.Error as e:
        raise CsvImportError(f"Ungültiges CSV in {path}: {e}") from e


# ─── Konvertierung ────────────────────────────────────────────────────────────

def convert_csv(path: Path, event: str = "", location: str = "",
                rooms=DEFAULT_ROOMS) -> dict:
    """CSV-Datei → Programm im JSON-Importformat."""
    sessions = parse_rows(read_rows(path), rooms)
    if not sessions:
        raise CsvImportError(f"{path}: keine Sessions gefunden")
    logger.info(f"CSV-Import: {len(sessions)} Sessions aus {path}")
    return {"event": event, "location": location, "sessions": sessions}


def write_event_json(payload: dict, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


def import_from_csv(path: Path, defaults: ScheduleDefaults, event: str = "",
                    location: str = "", rooms=DEFAULT_ROOMS) -> ImportedSchedule:
    """Konvertiert die CSV-Datei und baut daraus das Raster."""
    return build_schedule(convert_csv(path, event, location, rooms), defaults)
