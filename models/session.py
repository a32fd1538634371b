"""Datenmodell für eine Session (Inhalt eines Raums in einem Block)."""

from pydantic import BaseModel, ConfigDict


class Session(BaseModel):
    """Eine Session: Titel, Vortragende und Beschreibung für Raum × Block.

    start_time/end_time werden beim Aufbau aus dem Block kopiert und nie
    separat bearbeitet.
    """

    model_config = ConfigDict(frozen=True)

    classroom_id: int
    start_time: str        # "HH:MM"
    end_time: str          # "HH:MM"
    title: str = ""
    presenter: str = ""
    description: str = ""

    @property
    def is_empty(self) -> bool:
        """True, wenn für diese Zelle noch kein Inhalt eingetragen ist."""
        return not (self.title or self.presenter or self.description)
