from pydantic import BaseModel, Field, model_validator
from typing import Optional
from enum import Enum


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ─── ZEITBLÖCKE ───

class BlockSeed(BaseModel):
    """Ein Zeitblock des Standard-Rasters (wird beim Erststart angelegt)."""
    # Beginn im Format "HH:MM"
    start_time: str
    # Ende im Format "HH:MM"
    end_time: str


class SettingsBounds(BaseModel):
    """Erlaubte Wertebereiche der Laufzeit-Einstellungen.

    Werte außerhalb dieser Grenzen werden beim Speichern verworfen,
    der vorherige Wert bleibt erhalten.
    """
    # Sessionlänge in Minuten
    session_length_min: int = Field(20, ge=1)
    session_length_max: int = Field(300, ge=1)
    # Pausenlänge zwischen zwei Blöcken in Minuten
    break_min: int = Field(0, ge=0)
    break_max: int = Field(120, ge=0)

    @model_validator(mode='after')
    def validate_ranges(self):
        """Prüfe dass jede Untergrenze höchstens der Obergrenze entspricht."""
        if self.session_length_min > self.session_length_max:
            raise ValueError(
                f"Sessionlänge: Minimum {self.session_length_min} > "
                f"Maximum {self.session_length_max}")
        if self.break_min > self.break_max:
            raise ValueError(
                f"Pause: Minimum {self.break_min} > Maximum {self.break_max}")
        return self


class ScheduleDefaults(BaseModel):
    """Standardwerte für Zeitraster und Raumanzahl."""
    # Default-Sessionlänge, falls in der Datenbank nichts gespeichert ist
    session_length_minutes: int = Field(45, ge=1,
        description="Default-Sessionlänge (Minuten)")
    # Default-Pause zwischen Blöcken
    break_minutes: int = Field(15, ge=0,
        description="Default-Pause zwischen Blöcken (Minuten)")
    # Beginn des ersten Blocks, wenn kein expliziter Start angegeben ist
    first_start: str = Field("08:00",
        description="Beginn des ersten Blocks (HH:MM)")
    # Obergrenzen für Formulareingaben (werden geklemmt, nicht abgelehnt)
    max_blocks: int = Field(20, ge=1,
        description="Maximale Anzahl Zeitblöcke")
    max_classrooms: int = Field(30, ge=1,
        description="Maximale Anzahl Räume")
    # Anzahl Räume, die auf leeren Seiten als Platzhalter angezeigt werden
    placeholder_classrooms: int = Field(3, ge=1,
        description="Platzhalter-Räume, solange keine gespeichert sind")
    # Zeitblöcke, die beim Erststart angelegt werden
    seed_blocks: list[BlockSeed] = Field(
        description="Zeitblöcke beim Erststart")
    bounds: SettingsBounds = Field(default_factory=SettingsBounds)

    @model_validator(mode='after')
    def validate_seed_blocks(self):
        """Prüfe dass alle Standard-Blöcke gültige HH:MM-Zeiten haben."""
        from schedule.timeutil import parse_hhmm
        if parse_hhmm(self.first_start) is None:
            raise ValueError(f"Ungültige Startzeit: {self.first_start!r}")
        if not self.seed_blocks:
            raise ValueError("Mindestens ein Standard-Block erforderlich")
        for i, b in enumerate(self.seed_blocks, 1):
            if parse_hhmm(b.start_time) is None or parse_hhmm(b.end_time) is None:
                raise ValueError(
                    f"Standard-Block {i} hat ungültige Zeiten: "
                    f"{b.start_time}-{b.end_time}")
        if len(self.seed_blocks) > self.max_blocks:
            raise ValueError(
                f"{len(self.seed_blocks)} Standard-Blöcke > max_blocks ({self.max_blocks})")
        b = self.bounds
        if not b.session_length_min <= self.session_length_minutes <= b.session_length_max:
            raise ValueError(
                f"Default-Sessionlänge {self.session_length_minutes} liegt außerhalb "
                f"{b.session_length_min}–{b.session_length_max}")
        if not b.break_min <= self.break_minutes <= b.break_max:
            raise ValueError(
                f"Default-Pause {self.break_minutes} liegt außerhalb "
                f"{b.break_min}–{b.break_max}")
        return self


# ─── SERVER / SPEICHER / LOGGING ───

class ServerConfig(BaseModel):
    """HTTP-Server-Einstellungen."""
    host: str = Field("127.0.0.1", description="Bind-Adresse")
    port: int = Field(8080, ge=1, le=65535, description="Port")
    debug: bool = Field(False, description="Flask-Debugmodus")


class StorageConfig(BaseModel):
    """SQLite-Datenbank."""
    database_path: str = Field("scheduler.db",
        description="Pfad zur SQLite-Datei")


class LoggingConfig(BaseModel):
    level: LogLevel = Field(LogLevel.INFO)
    # Jede HTTP-Anfrage protokollieren (Methode, Pfad, Status, Dauer)
    log_requests: bool = Field(True)


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration des Raumplaners."""
    # Name der Veranstaltung (Seitentitel, Export-Kopfzeile)
    event_name: str = Field("Session-Raumplaner",
        description="Name der Veranstaltung")
    # Optionaler Veranstaltungsort
    location: Optional[str] = None
    schedule: ScheduleDefaults
    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
