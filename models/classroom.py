"""Datenmodell für einen Raum (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict


def default_classroom_name(classroom_id: int) -> str:
    return f"Classroom {classroom_id}"


class Classroom(BaseModel):
    """Repräsentiert einen Raum, in dem Sessions stattfinden."""

    model_config = ConfigDict(frozen=True)

    id: int    # 1-basiert, lückenlos 1..N
    name: str  # "Classroom 1", "Glacier North"

    @classmethod
    def with_default_name(cls, classroom_id: int, name: str = "") -> "Classroom":
        """Erzeugt einen Raum; leere Namen werden durch den Default ersetzt."""
        name = (name or "").strip()
        return cls(id=classroom_id, name=name or default_classroom_name(classroom_id))
