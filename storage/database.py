"""SQLite-Verbindung und Tabellenschema."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Fehler beim Zugriff auf die Datenbank."""


SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS classrooms (
        id   INTEGER PRIMARY KEY,
        name TEXT NOT NULL DEFAULT ''
    )""",
    """
    CREATE TABLE IF NOT EXISTS sessions (
        id           INTEGER PRIMARY KEY AUTOINCREMENT,
        classroom_id INTEGER,
        start_time   TEXT NOT NULL,  -- HH:MM
        end_time     TEXT NOT NULL,  -- HH:MM
        title        TEXT NOT NULL,
        presenter    TEXT NOT NULL,
        description  TEXT
    )""",
    """
    CREATE TABLE IF NOT EXISTS blocks (
        id         INTEGER PRIMARY KEY,
        start_time TEXT NOT NULL,
        end_time   TEXT NOT NULL
    )""",
    """
    CREATE TABLE IF NOT EXISTS settings (
        key   TEXT PRIMARY KEY,
        value TEXT
    )""",
]


class Database:
    """Dünne Hülle um eine SQLite-Datei.

    Jede Operation öffnet eine eigene Verbindung; Verbindungen werden nicht
    zwischen Threads geteilt.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def connect(self) -> sqlite3.Connection:
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        con = sqlite3.connect(str(self.path))
        con.row_factory = sqlite3.Row
        return con

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Verbindung öffnen, bei Fehler StorageError, immer schließen."""
        try:
            con = self.connect()
        except sqlite3.Error as e:
            raise StorageError(f"Datenbank {self.path} nicht erreichbar: {e}") from e
        try:
            yield con
        except sqlite3.Error as e:
            raise StorageError(f"Datenbankfehler ({self.path}): {e}") from e
        finally:
            con.close()

    def create_tables(self) -> None:
        """Legt alle Tabellen an (idempotent)."""
        with self.connection() as con:
            for stmt in SCHEMA:
                con.execute(stmt)
            con.commit()
        logger.debug(f"Schema geprüft: {self.path}")

    def table_counts(self) -> dict[str, int]:
        """Zeilenanzahl pro Tabelle (für Statusausgaben)."""
        counts = {}
        with self.connection() as con:
            for table in ("classrooms", "sessions", "blocks", "settings"):
                counts[table] = con.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        return counts
