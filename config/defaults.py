from config.schema import (
    AppConfig,
    BlockSeed,
    ScheduleDefaults,
)


# ─── STANDARD-ZEITBLÖCKE ───
# Werden beim ersten Start angelegt, solange die Tabelle "blocks" leer ist.

DEFAULT_BLOCKS: list[tuple[str, str]] = [
    ("08:00", "09:30"),
    ("09:40", "11:10"),
    ("11:20", "12:50"),
    ("13:30", "15:00"),   # nach der Mittagspause
    ("15:10", "16:40"),
]

# Schlüssel der key/value-Tabelle "settings"
SETTING_SESSION_LENGTH = "session_length_minutes"
SETTING_BREAK_MINUTES = "break_minutes"


def default_schedule() -> ScheduleDefaults:
    """Standard-Zeitraster: 45 Min. Sessions, 15 Min. Pause, 5 Blöcke ab 08:00.

    Blöcke beim Erststart:
    1. Block  08:00 - 09:30
    2. Block  09:40 - 11:10
    3. Block  11:20 - 12:50
    4. Block  13:30 - 15:00
    5. Block  15:10 - 16:40

    Die Seed-Blöcke sind länger als die Default-Sessionlänge;
    sie werden erst beim Speichern des Rasters neu berechnet.
    """
    return ScheduleDefaults(
        session_length_minutes=45,
        break_minutes=15,
        first_start="08:00",
        seed_blocks=[BlockSeed(start_time=s, end_time=e) for s, e in DEFAULT_BLOCKS],
    )


def default_app_config() -> AppConfig:
    """Komplette Default-Konfiguration."""
    return AppConfig(
        event_name="Session-Raumplaner",
        schedule=default_schedule(),
    )
