"""Zeitraster, Einstellungen und Cache des Raumplaners."""

from .block_generator import BlockSpec, generate_blocks, clamp_count
from .settings_store import SettingsStore
from .cache import ScheduleCache, CellContent, CellFields
from .rwlock import ReadWriteLock

__all__ = [
    "BlockSpec",
    "generate_blocks",
    "clamp_count",
    "SettingsStore",
    "ScheduleCache",
    "CellContent",
    "CellFields",
    "ReadWriteLock",
]
