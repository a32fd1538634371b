"""ScheduleCache: In-Memory-Sicht auf Räume, Sessions und Blöcke.

Alle drei Sammlungen teilen sich EINEN Reader/Writer-Lock. Schreiber bauen
neue Sammlungen auf und tauschen sie komplett aus. Danach wird der dann
aktuelle Cache-Inhalt in die Datenbank zurückgeschrieben: das
Zurückschreiben läuft hinter einem eigenen Mutex, kopiert den Cache kurz
unter dem Lese-Lock und schreibt außerhalb davon. Das zuletzt laufende
Zurückschreiben sieht damit immer den neuesten Cache-Zustand.
Datenbank- und Rendering-I/O finden nie unter dem Reader/Writer-Lock statt.

Konsistenzfenster: Zwischen dem Austausch im Cache und dem Ende des
Zurückschreibens kann die Datenbank hinter dem Cache liegen. Schlägt das
Zurückschreiben fehl, bleibt der Cache maßgeblich bis zum nächsten Start.
"""

import logging
import threading
from typing import Mapping, Optional

from pydantic import BaseModel, field_validator

from config.schema import ScheduleDefaults
from models.block import Block
from models.classroom import Classroom
from models.outcome import WriteReport
from models.session import Session
from models.snapshot import Snapshot
from schedule.block_generator import BlockSpec, clamp_count, generate_blocks
from schedule.rwlock import ReadWriteLock
from schedule.settings_store import SettingsStore
from schedule.timeutil import sort_key
from storage.database import StorageError
from storage.persistence import PersistenceAdapter

logger = logging.getLogger(__name__)


class CellContent(BaseModel):
    """Formularinhalt einer Zelle (Raum × Block), Whitespace getrimmt."""

    title: str = ""
    presenter: str = ""
    description: str = ""

    @field_validator("title", "presenter", "description", mode="before")
    @classmethod
    def _strip(cls, v):
        return (v or "").strip()


# (classroom_id, block_index) → Inhalt; block_index ist 0-basiert
CellFields = Mapping[tuple[int, int], CellContent]


class ScheduleCache:

    def __init__(
        self,
        persistence: PersistenceAdapter,
        settings: SettingsStore,
        defaults: ScheduleDefaults,
    ):
        self.persistence = persistence
        self.settings = settings
        self.defaults = defaults
        self._lock = ReadWriteLock()
        self._persist_lock = threading.Lock()
        self._classrooms: dict[int, Classroom] = {}
        self._sessions: dict[int, list[Session]] = {}
        self._blocks: list[Block] = []

    @classmethod
    def bootstrap(
        cls, persistence: PersistenceAdapter, defaults: ScheduleDefaults
    ) -> "ScheduleCache":
        """Erzeugt den Cache und lädt den gespeicherten Zustand.

        StorageError ist hier fatal und wird an den Aufrufer weitergereicht.
        """
        cache = cls(persistence, SettingsStore(persistence, defaults), defaults)
        cache.load()
        return cache

    def load(self) -> None:
        """Lädt Räume, Sessions, Blöcke und danach die Einstellungen."""
        state = self.persistence.load_state()
        with self._lock.write_locked():
            self._classrooms = dict(state.classrooms)
            self._sessions = {cid: list(s) for cid, s in state.sessions.items()}
            self._blocks = list(state.blocks)
        self.settings.load()

    # ─── Lesen ───

    def read_snapshot(self) -> Snapshot:
        """Geordnete Kopie des Caches; der Lock ist bei Rückgabe freigegeben."""
        settings = self.settings.current
        with self._lock.read_locked():
            classrooms = sorted(self._classrooms.values(), key=lambda c: c.id)
            cells = {cid: list(lst) for cid, lst in self._sessions.items()}
            blocks = sorted(self._blocks, key=lambda b: b.id)
        sessions = {
            cid: sorted(lst, key=lambda s: sort_key(s.start_time))
            for cid, lst in cells.items()
        }
        return Snapshot(
            classrooms=classrooms,
            sessions_by_classroom=sessions,
            cells_by_classroom=cells,
            blocks=blocks,
            settings=settings,
        )

    @property
    def classroom_count(self) -> int:
        with self._lock.read_locked():
            return len(self._classrooms)

    def display_classroom_count(self) -> int:
        """Anzahl Räume für Formulare; Platzhalter, solange keine existieren."""
        return self.classroom_count or self.defaults.placeholder_classrooms

    # ─── Schreiben ───

    def replace_all(
        self,
        classroom_count: int,
        block_spec: BlockSpec,
        settings_update: Optional[Mapping[str, Optional[str]]] = None,
        cell_fields: Optional[CellFields] = None,
        report: Optional[WriteReport] = None,
    ) -> WriteReport:
        """Baut Räume, Blöcke und Sessions komplett neu auf und persistiert sie.

        1. Einstellungen aktualisieren (leere Werte werden übersprungen).
        2. Exklusiver Lock: Räume 1..classroom_count (bestehende Namen bleiben),
           Blöcke generieren, pro (Raum, Block) genau eine Session.
        3. Lock freigeben, dann Räume, Sessions und Blöcke zurückschreiben.
        """
        report = report if report is not None else WriteReport()
        cell_fields = cell_fields or {}

        for key, raw in (settings_update or {}).items():
            if raw is None or not str(raw).strip():
                continue
            report.add(self.settings.update(key, raw))
        settings = self.settings.current

        count = clamp_count(classroom_count, 1, self.defaults.max_classrooms)

        with self._lock.write_locked():
            classrooms = {
                cid: self._classrooms.get(cid) or Classroom.with_default_name(cid)
                for cid in range(1, count + 1)
            }
            blocks = generate_blocks(
                block_spec, settings,
                first_start=self.defaults.first_start,
                max_blocks=self.defaults.max_blocks,
                report=report,
            )
            sessions = self._build_sessions(classrooms, blocks, cell_fields)
            self._classrooms = classrooms
            self._blocks = blocks
            self._sessions = sessions

        logger.info(f"Raster neu aufgebaut: {len(classrooms)} Räume, {len(blocks)} Blöcke")
        report.persisted = self._persist(classrooms=True, sessions=True, blocks=True)
        return report

    def save_content(
        self,
        names: Optional[Mapping[int, str]] = None,
        cell_fields: Optional[CellFields] = None,
        report: Optional[WriteReport] = None,
    ) -> WriteReport:
        """Übernimmt Raumnamen und Zelleninhalte für das bestehende Raster.

        Die Blöcke bleiben unverändert; die Sessions aller Räume werden aus
        den aktuellen Blöcken neu aufgebaut. Leere Namen ändern nichts.
        """
        report = report if report is not None else WriteReport()
        names = names or {}
        cell_fields = cell_fields or {}

        with self._lock.write_locked():
            count = len(self._classrooms) or self.defaults.placeholder_classrooms
            classrooms: dict[int, Classroom] = {}
            for cid in range(1, count + 1):
                existing = self._classrooms.get(cid) or Classroom.with_default_name(cid)
                new_name = (names.get(cid) or "").strip()
                classrooms[cid] = (
                    existing.model_copy(update={"name": new_name}) if new_name else existing
                )
            sessions = self._build_sessions(classrooms, self._blocks, cell_fields)
            self._classrooms = classrooms
            self._sessions = sessions

        logger.info(f"Inhalte gespeichert: {len(classrooms)} Räume")
        report.persisted = self._persist(classrooms=True, sessions=True)
        return report

    def load_imported(
        self,
        classrooms: list[Classroom],
        blocks: list[Block],
        sessions: Mapping[int, list[Session]],
    ) -> bool:
        """Ersetzt den kompletten Zustand durch importierte Daten.

        sessions enthält pro Raum eine Session je Block, in Block-Reihenfolge.
        """
        new_classrooms = {c.id: c for c in classrooms}
        new_sessions = {cid: list(lst) for cid, lst in sessions.items()}
        new_blocks = sorted(blocks, key=lambda b: b.id)
        with self._lock.write_locked():
            self._classrooms = new_classrooms
            self._sessions = new_sessions
            self._blocks = new_blocks
        return self._persist(classrooms=True, sessions=True, blocks=True)

    # ─── Intern ───

    @staticmethod
    def _build_sessions(
        classrooms: Mapping[int, Classroom],
        blocks: list[Block],
        cell_fields: CellFields,
    ) -> dict[int, list[Session]]:
        empty = CellContent()
        sessions: dict[int, list[Session]] = {}
        for cid in classrooms:
            row = []
            for idx, block in enumerate(blocks):
                cell = cell_fields.get((cid, idx), empty)
                row.append(Session(
                    classroom_id=cid,
                    start_time=block.start_time,
                    end_time=block.end_time,
                    title=cell.title,
                    presenter=cell.presenter,
                    description=cell.description,
                ))
            sessions[cid] = row
        return sessions

    def _persist(
        self,
        classrooms: bool = False,
        sessions: bool = False,
        blocks: bool = False,
    ) -> bool:
        """Schreibt den aktuellen Cache-Inhalt der gewählten Entitätsarten zurück.

        Läuft hinter _persist_lock; zwei Zurückschreibvorgänge überholen sich
        nie. Der Cache wird unter dem Lese-Lock kopiert, geschrieben wird
        außerhalb davon. Fehler werden geloggt, nicht weitergereicht; jede
        Entitätsart wird unabhängig geschrieben.
        """
        ok = True
        with self._persist_lock:
            with self._lock.read_locked():
                current_classrooms = list(self._classrooms.values())
                current_sessions = {cid: list(lst) for cid, lst in self._sessions.items()}
                current_blocks = list(self._blocks)

            jobs = []
            if classrooms:
                jobs.append(("Räume",
                             lambda: self.persistence.save_classrooms(current_classrooms)))
            if sessions:
                jobs.append(("Sessions",
                             lambda: self.persistence.save_sessions(current_sessions)))
            if blocks:
                jobs.append(("Blöcke", lambda: self.persistence.save_blocks(current_blocks)))
            for label, job in jobs:
                try:
                    job()
                except StorageError as e:
                    ok = False
                    logger.error(f"{label} konnten nicht gespeichert werden: {e}")
        return ok
