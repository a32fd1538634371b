"""Laufzeit-Einstellungen des Zeitrasters (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict


class Settings(BaseModel):
    """Sessionlänge und Pause in Minuten.

    Die Grenzen (20–300 bzw. 0–120) prüft der SettingsStore beim Update;
    das Modell selbst ist nur ein Werte-Container.
    """

    model_config = ConfigDict(frozen=True)

    session_length_minutes: int
    break_minutes: int
