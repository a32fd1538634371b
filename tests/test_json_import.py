"""Tests für den JSON-Import eines Veranstaltungsprogramms."""

import json
from pathlib import Path

import pytest

from data.json_import import (
    JsonImportError,
    build_schedule,
    import_from_json,
    parse_time_slot,
)


def _payload(*sessions, event="DevDays", location="Anchorage") -> dict:
    return {"event": event, "location": location, "sessions": list(sessions)}


def _entry(slot, room, title="", **extra) -> dict:
    return {"time_slot": slot, "room": room, "title": title, **extra}


class TestParseTimeSlot:
    def test_range(self):
        assert parse_time_slot("9:25AM - 10:10AM", 45) == (9 * 60 + 25, 10 * 60 + 10)

    def test_pm_and_noon(self):
        assert parse_time_slot("12:00PM - 1:30PM", 45) == (12 * 60, 13 * 60 + 30)
        assert parse_time_slot("12:15AM", 30) == (15, 45)

    def test_single_time_uses_session_length(self):
        assert parse_time_slot("2PM", 45) == (14 * 60, 14 * 60 + 45)

    def test_unparseable(self):
        assert parse_time_slot("nach dem Mittag", 45) is None
        assert parse_time_slot("", 45) is None


class TestBuildSchedule:
    def test_rooms_and_blocks(self, defaults):
        """Räume in Reihenfolge des Auftretens, Zeitfenster chronologisch."""
        imported = build_schedule(_payload(
            _entry("10:20AM - 11:05AM", "Glacier South", "B"),
            _entry("9:25AM - 10:10AM", "Glacier North", "A"),
            _entry("9:25AM - 10:10AM", "Glacier South", "C"),
        ), defaults)

        assert [c.name for c in imported.classrooms] == ["Glacier South", "Glacier North"]
        assert [(b.id, b.start_time, b.end_time) for b in imported.blocks] == [
            (1, "09:25", "10:10"), (2, "10:20", "11:05")]
        assert [s.title for s in imported.sessions[1]] == ["C", "B"]
        assert [s.title for s in imported.sessions[2]] == ["A", ""]
        assert imported.filled_sessions == 3
        assert imported.event == "DevDays"

    def test_one_session_per_cell(self, defaults):
        imported = build_schedule(_payload(
            _entry("9AM", "R1", "x"),
            _entry("11AM", "R2", "y"),
        ), defaults)
        for cid, sessions in imported.sessions.items():
            assert len(sessions) == len(imported.blocks)

    def test_tbd_becomes_empty(self, defaults):
        imported = build_schedule(_payload(
            _entry("9AM", "R1", "TBD", description="tba", presenter=" "),
        ), defaults)
        session = imported.sessions[1][0]
        assert session.is_empty

    def test_presenter_from_speakers(self, defaults):
        imported = build_schedule(_payload(
            _entry("9AM", "R1", "Panel", speakers=["Ada", "TBD", "Grace"]),
        ), defaults)
        assert imported.sessions[1][0].presenter == "Ada, Grace"

    def test_speakers_as_plain_string(self, defaults):
        """Ein einzelner String gilt als ein Vortragender, nicht als Zeichenfolge."""
        imported = build_schedule(_payload(
            _entry("9AM", "R1", "Solo", speakers="Grace Hopper"),
        ), defaults)
        assert imported.sessions[1][0].presenter == "Grace Hopper"

    def test_duplicate_cell_skipped(self, defaults):
        imported = build_schedule(_payload(
            _entry("9AM", "R1", "erste"),
            _entry("9AM", "R1", "zweite"),
        ), defaults)
        assert imported.sessions[1][0].title == "erste"
        assert len(imported.skipped) == 1

    def test_entries_without_room_skipped(self, defaults):
        imported = build_schedule(_payload(
            _entry("9AM", "R1", "ok"),
            _entry("9AM", "", "ohne Raum"),
            _entry("irgendwann", "R1", "ohne Zeit"),
            "kein Objekt",
        ), defaults)
        assert len(imported.skipped) == 3
        assert imported.filled_sessions == 1

    def test_nothing_importable_raises(self, defaults):
        with pytest.raises(JsonImportError):
            build_schedule(_payload(_entry("", "R1")), defaults)

    def test_too_many_rooms_raises(self, defaults):
        entries = [_entry("9AM", f"Raum {i}") for i in range(defaults.max_classrooms + 1)]
        with pytest.raises(JsonImportError):
            build_schedule(_payload(*entries), defaults)


class TestImportFromJson:
    def test_reads_file(self, tmp_path: Path, defaults):
        path = tmp_path / "programm.json"
        path.write_text(json.dumps(_payload(_entry("9:25AM - 10:10AM", "R1", "Opening"))),
                        encoding="utf-8")
        imported = import_from_json(path, defaults)
        assert imported.sessions[1][0].title == "Opening"
        assert "Räume: 1" in imported.summary()

    def test_invalid_json_raises(self, tmp_path: Path, defaults):
        path = tmp_path / "kaputt.json"
        path.write_text("{nicht json", encoding="utf-8")
        with pytest.raises(JsonImportError):
            import_from_json(path, defaults)

    def test_missing_sessions_key_raises(self, tmp_path: Path, defaults):
        path = tmp_path / "leer.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(JsonImportError):
            import_from_json(path, defaults)

    def test_missing_file_raises(self, tmp_path: Path, defaults):
        with pytest.raises(JsonImportError):
            import_from_json(tmp_path / "fehlt.json", defaults)
