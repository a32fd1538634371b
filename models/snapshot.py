"""Snapshot: konsistente Kopie des Caches für die Darstellung."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from models.block import Block
from models.classroom import Classroom
from models.session import Session
from models.settings import Settings


class Snapshot(BaseModel):
    """Geordnete Sicht auf Räume, Sessions, Blöcke und Einstellungen.

    Räume nach id, Blöcke nach id sortiert. Sessions gibt es in zwei
    Reihenfolgen aus demselben Cache-Zustand:

    - sessions_by_classroom: pro Raum nach Beginn sortiert (Raumansicht)
    - cells_by_classroom: pro Raum in Block-Reihenfolge, Index = Block-Index
      (Formulare, Raster, Export)

    Bei überlappenden oder rückwärts laufenden Blöcken unterscheiden sich
    beide Reihenfolgen. Wird außerhalb des Locks gerendert.
    """

    model_config = ConfigDict(frozen=True)

    classrooms: list[Classroom]
    sessions_by_classroom: dict[int, list[Session]]
    cells_by_classroom: dict[int, list[Session]]
    blocks: list[Block]
    settings: Settings

    def sessions_for(self, classroom_id: int) -> list[Session]:
        return self.sessions_by_classroom.get(classroom_id, [])

    def cells_for(self, classroom_id: int) -> list[Session]:
        return self.cells_by_classroom.get(classroom_id, [])

    def cell(self, classroom_id: int, block_index: int) -> Optional[Session]:
        """Session eines Raums im Block mit Index block_index (0-basiert)."""
        cells = self.cells_for(classroom_id)
        return cells[block_index] if 0 <= block_index < len(cells) else None

    def classroom(self, classroom_id: int):
        return next((c for c in self.classrooms if c.id == classroom_id), None)

    @property
    def total_sessions(self) -> int:
        return sum(len(v) for v in self.sessions_by_classroom.values())

    def summary(self) -> str:
        """Kurze Übersicht über den Zustand."""
        lines = [
            f"Räume: {len(self.classrooms)}",
            f"Blöcke: {len(self.blocks)}",
            f"Sessions: {self.total_sessions}",
            f"Sessionlänge: {self.settings.session_length_minutes} Min., "
            f"Pause: {self.settings.break_minutes} Min.",
        ]
        return "\n".join(lines)
