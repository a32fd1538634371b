"""SQLite-Persistenz für Räume, Sessions, Blöcke und Einstellungen."""

from .database import Database, StorageError
from .persistence import PersistenceAdapter, LoadedState

__all__ = ["Database", "StorageError", "PersistenceAdapter", "LoadedState"]
