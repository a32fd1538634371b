"""Tests für die SQLite-Persistenz (Voll-Ersetzung pro Tabelle)."""

from pathlib import Path

import pytest

from models.block import Block
from models.classroom import Classroom
from models.session import Session
from storage.database import Database, StorageError
from storage.persistence import PersistenceAdapter


def _session(cid: int, start: str, end: str, title: str = "") -> Session:
    return Session(classroom_id=cid, start_time=start, end_time=end, title=title)


# ─── START ────────────────────────────────────────────────────────────────────

class TestLoadState:
    def test_seeds_default_blocks(self, persistence):
        """Leere Datenbank → 5 Standard-Blöcke, sofort gespeichert."""
        state = persistence.load_state()
        assert state.seeded_blocks is True
        assert [(b.start_time, b.end_time) for b in state.blocks] == [
            ("08:00", "09:30"),
            ("09:40", "11:10"),
            ("11:20", "12:50"),
            ("13:30", "15:00"),
            ("15:10", "16:40"),
        ]
        assert len(persistence.load_blocks()) == 5
        assert state.classrooms == {}
        assert state.total_sessions == 0

    def test_second_load_does_not_seed(self, persistence):
        persistence.load_state()
        persistence.save_blocks([Block(id=1, start_time="10:00", end_time="11:00")])
        state = persistence.load_state()
        assert state.seeded_blocks is False
        assert len(state.blocks) == 1

    def test_sessions_grouped_by_classroom(self, persistence):
        persistence.save_sessions({
            1: [_session(1, "08:00", "08:45", "A")],
            2: [_session(2, "08:00", "08:45", "B"), _session(2, "09:00", "09:45", "C")],
        })
        sessions = persistence.load_sessions()
        assert [s.title for s in sessions[1]] == ["A"]
        assert [s.title for s in sessions[2]] == ["B", "C"]

    def test_unreachable_database_raises(self, tmp_path: Path, defaults):
        """Ein Verzeichnis als Datenbankpfad → StorageError beim Start."""
        adapter = PersistenceAdapter(Database(tmp_path), defaults)
        with pytest.raises(StorageError):
            adapter.load_state()


# ─── VOLL-ERSETZUNG ───────────────────────────────────────────────────────────

class TestReplaceTables:
    def test_classrooms_fully_replaced(self, persistence):
        """Alte Zeilen verschwinden, nur der neue Bestand bleibt."""
        persistence.save_classrooms([Classroom(id=i, name=f"R{i}") for i in (1, 2, 3)])
        persistence.save_classrooms([Classroom(id=1, name="Aula")])
        assert persistence.load_classrooms() == {1: Classroom(id=1, name="Aula")}

    def test_sessions_fully_replaced(self, persistence, db):
        persistence.save_sessions({1: [_session(1, "08:00", "08:45")] * 4})
        persistence.save_sessions({2: [_session(2, "10:00", "10:45")]})
        assert db.table_counts()["sessions"] == 1
        assert list(persistence.load_sessions()) == [2]

    def test_empty_save_clears_table(self, persistence, db):
        persistence.save_blocks([Block(id=1, start_time="08:00", end_time="08:45")])
        assert persistence.save_blocks([]) == 0
        assert db.table_counts()["blocks"] == 0

    def test_failing_row_skipped(self, persistence):
        """Doppelte id → Zeile übersprungen, der Rest wird geschrieben."""
        inserted = persistence.save_classrooms([
            Classroom(id=1, name="erster"),
            Classroom(id=1, name="doppelt"),
            Classroom(id=2, name="zweiter"),
        ])
        assert inserted == 2
        rooms = persistence.load_classrooms()
        assert rooms[1].name == "erster"
        assert rooms[2].name == "zweiter"


# ─── EINSTELLUNGEN ────────────────────────────────────────────────────────────

class TestSettingsTable:
    def test_missing_key_is_none(self, persistence):
        assert persistence.get_setting("session_length_minutes") is None

    def test_set_overwrites(self, persistence, db):
        persistence.set_setting("break_minutes", "10")
        persistence.set_setting("break_minutes", "20")
        assert persistence.get_setting("break_minutes") == "20"
        assert db.table_counts()["settings"] == 1
