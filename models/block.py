"""Datenmodell für einen Zeitblock im Tagesraster (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict


class Block(BaseModel):
    """Ein Zeitblock, unabhängig von einem Raum.

    Immutable (frozen=True), damit Snapshots ohne Kopie geteilt werden können.
    """

    model_config = ConfigDict(frozen=True)

    id: int          # 1-basiert, lückenlos 1..N
    start_time: str  # "HH:MM"
    end_time: str    # "HH:MM"

    @property
    def label(self) -> str:
        """Anzeige-Label, z.B. "08:00–08:45"."""
        return f"{self.start_time}–{self.end_time}"
