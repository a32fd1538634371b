"""Persistenz-Adapter: Voll-Ersetzung zwischen Cache und SQLite.

Pro Entitätsart (Räume, Sessions, Blöcke) gilt: alle Zeilen löschen, dann
den kompletten Cache-Inhalt neu einfügen, jeweils in einer eigenen
Transaktion. Es gibt keinen Diff und kein Teil-Update.

Fehlerverhalten:
- Verbindungs- oder Transaktionsfehler → StorageError (der Aufrufer
  entscheidet, ob fatal oder nur geloggt).
- Einzelne fehlschlagende Zeilen werden geloggt und übersprungen.
"""

import logging
import sqlite3
from typing import Iterable, Mapping, Optional, Sequence

from pydantic import BaseModel

from config.schema import ScheduleDefaults
from models.block import Block
from models.classroom import Classroom
from models.session import Session
from storage.database import Database

logger = logging.getLogger(__name__)


class LoadedState(BaseModel):
    """Dauerhafter Zustand, wie er beim Start in den Cache geladen wird."""

    classrooms: dict[int, Classroom]
    sessions: dict[int, list[Session]]
    blocks: list[Block]
    seeded_blocks: bool = False   # True, wenn Standard-Blöcke angelegt wurden

    @property
    def total_sessions(self) -> int:
        return sum(len(v) for v in self.sessions.values())


class PersistenceAdapter:
    """Einzige Komponente mit Lese-/Schreibzugriff auf die Tabellen."""

    def __init__(self, db: Database, defaults: ScheduleDefaults):
        self.db = db
        self.defaults = defaults

    # ─── Start ───

    def initialize(self) -> None:
        """Tabellen anlegen."""
        self.db.create_tables()

    def load_state(self) -> LoadedState:
        """Lädt Räume, Sessions und Blöcke.

        Sind keine Blöcke gespeichert, werden die Standard-Blöcke angelegt
        und sofort persistiert. StorageError wird nicht abgefangen.
        """
        self.initialize()
        classrooms = self.load_classrooms()
        sessions = self.load_sessions()
        blocks = self.load_blocks()

        seeded = False
        if not blocks:
            logger.info(
                f"Kein Zeitraster gefunden → lege {len(self.defaults.seed_blocks)} "
                f"Standard-Blöcke an"
            )
            blocks = self.default_blocks()
            self.save_blocks(blocks)
            seeded = True

        if not classrooms:
            logger.info("Keine Räume gespeichert – werden beim Speichern des Rasters angelegt")

        state = LoadedState(classrooms=classrooms, sessions=sessions,
                            blocks=blocks, seeded_blocks=seeded)
        logger.info(
            f"Geladen: {len(classrooms)} Räume, {len(blocks)} Blöcke, "
            f"{state.total_sessions} Sessions"
        )
        return state

    def default_blocks(self) -> list[Block]:
        return [
            Block(id=i, start_time=b.start_time, end_time=b.end_time)
            for i, b in enumerate(self.defaults.seed_blocks, 1)
        ]

    # ─── Lesen ───

    def load_classrooms(self) -> dict[int, Classroom]:
        with self.db.connection() as con:
            rows = con.execute("SELECT id, name FROM classrooms ORDER BY id").fetchall()
        return {r["id"]: Classroom(id=r["id"], name=r["name"]) for r in rows}

    def load_sessions(self) -> dict[int, list[Session]]:
        sessions: dict[int, list[Session]] = {}
        with self.db.connection() as con:
            rows = con.execute(
                "SELECT classroom_id, start_time, end_time, title, presenter, description "
                "FROM sessions ORDER BY id"
            ).fetchall()
        for r in rows:
            s = Session(
                classroom_id=r["classroom_id"],
                start_time=r["start_time"],
                end_time=r["end_time"],
                title=r["title"] or "",
                presenter=r["presenter"] or "",
                description=r["description"] or "",
            )
            sessions.setdefault(s.classroom_id, []).append(s)
        return sessions

    def load_blocks(self) -> list[Block]:
        with self.db.connection() as con:
            rows = con.execute(
                "SELECT id, start_time, end_time FROM blocks ORDER BY id"
            ).fetchall()
        return [Block(id=r["id"], start_time=r["start_time"], end_time=r["end_time"])
                for r in rows]

    def get_setting(self, key: str) -> Optional[str]:
        with self.db.connection() as con:
            row = con.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return None if row is None else row["value"]

    # ─── Schreiben (Voll-Ersetzung) ───

    def save_classrooms(self, classrooms: Iterable[Classroom]) -> int:
        rows = [(c.id, c.name) for c in sorted(classrooms, key=lambda c: c.id)]
        return self._replace_table(
            "classrooms", "INSERT INTO classrooms (id, name) VALUES (?, ?)", rows)

    def save_sessions(self, sessions: Mapping[int, Sequence[Session]]) -> int:
        rows = [
            (cid, s.start_time, s.end_time, s.title, s.presenter, s.description)
            for cid in sorted(sessions)
            for s in sessions[cid]
        ]
        return self._replace_table(
            "sessions",
            "INSERT INTO sessions (classroom_id, start_time, end_time, title, presenter, "
            "description) VALUES (?, ?, ?, ?, ?, ?)",
            rows,
        )

    def save_blocks(self, blocks: Iterable[Block]) -> int:
        rows = [(b.id, b.start_time, b.end_time) for b in blocks]
        return self._replace_table(
            "blocks", "INSERT INTO blocks (id, start_time, end_time) VALUES (?, ?, ?)", rows)

    def set_setting(self, key: str, value: str) -> None:
        with self.db.connection() as con:
            with con:
                con.execute(
                    "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                    (key, str(value)),
                )

    def _replace_table(self, table: str, insert_sql: str, rows: list[tuple]) -> int:
        """DELETE + Bulk-INSERT in einer Transaktion; gibt eingefügte Zeilen zurück."""
        inserted = 0
        with self.db.connection() as con:
            with con:
                con.execute(f"DELETE FROM {table}")
                for row in rows:
                    try:
                        con.execute(insert_sql, row)
                        inserted += 1
                    except sqlite3.Error as e:
                        logger.warning(f"{table}: Zeile {row!r} übersprungen: {e}")
        logger.debug(f"{table}: {inserted}/{len(rows)} Zeilen geschrieben")
        return inserted
