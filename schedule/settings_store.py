"""Settings-Store: Sessionlänge und Pause mit Defaults und Persistenz.

Ungültige Updates (nicht parsebar oder außerhalb der Grenzen) werden
stillschweigend verworfen; der vorherige Wert bleibt erhalten.
"""

import logging
import threading
from typing import Optional

from config.defaults import SETTING_BREAK_MINUTES, SETTING_SESSION_LENGTH
from config.schema import ScheduleDefaults
from models.outcome import FieldOutcome, OutcomeStatus
from models.settings import Settings
from schedule.block_generator import parse_int
from storage.database import StorageError
from storage.persistence import PersistenceAdapter

logger = logging.getLogger(__name__)


class SettingsStore:

    def __init__(self, persistence: PersistenceAdapter, defaults: ScheduleDefaults):
        self.persistence = persistence
        self.defaults = defaults
        b = defaults.bounds
        self._bounds = {
            SETTING_SESSION_LENGTH: (b.session_length_min, b.session_length_max),
            SETTING_BREAK_MINUTES: (b.break_min, b.break_max),
        }
        self._defaults = {
            SETTING_SESSION_LENGTH: defaults.session_length_minutes,
            SETTING_BREAK_MINUTES: defaults.break_minutes,
        }
        self._lock = threading.Lock()
        self._values = dict(self._defaults)

    # ─── Lesen ───

    @property
    def current(self) -> Settings:
        with self._lock:
            return Settings(
                session_length_minutes=self._values[SETTING_SESSION_LENGTH],
                break_minutes=self._values[SETTING_BREAK_MINUTES],
            )

    def load(self) -> tuple[int, int]:
        """Liest beide Werte aus der Tabelle settings.

        Fehlende Schlüssel werden mit dem Default belegt und sofort
        gespeichert. Ungültige gespeicherte Werte werden ignoriert.
        StorageError wird weitergereicht (Start-Phase).
        """
        for key, default in self._defaults.items():
            raw = self.persistence.get_setting(key)
            if raw is None:
                logger.info(f"Einstellung '{key}' fehlt → Default {default}")
                self.persistence.set_setting(key, str(default))
                value = default
            else:
                value = self._validate(key, raw)
                if value is None:
                    logger.warning(
                        f"Gespeicherter Wert {key}={raw!r} ungültig → Default {default}")
                    value = default
            with self._lock:
                self._values[key] = value

        s = self.current
        return s.session_length_minutes, s.break_minutes

    # ─── Schreiben ───

    def update(self, key: str, raw_value: Optional[str]) -> FieldOutcome:
        """Setzt einen Wert, falls gültig, und speichert ihn sofort.

        Unbekannte Schlüssel, nicht parsebare oder außerhalb der Grenzen
        liegende Werte ergeben REJECTED; der vorherige Wert bleibt.
        """
        if key not in self._defaults:
            logger.debug(f"Unbekannte Einstellung '{key}' ignoriert")
            return FieldOutcome(field=key, status=OutcomeStatus.REJECTED, raw=raw_value)

        value = self._validate(key, raw_value)
        if value is None:
            with self._lock:
                kept = self._values[key]
            logger.debug(f"Einstellung {key}={raw_value!r} verworfen, bleibt {kept}")
            return FieldOutcome(field=key, status=OutcomeStatus.REJECTED,
                                raw=raw_value, value=str(kept))

        with self._lock:
            self._values[key] = value
        try:
            self.persistence.set_setting(key, str(value))
        except StorageError as e:
            logger.error(f"Einstellung {key}={value} nicht gespeichert: {e}")
        return FieldOutcome(field=key, status=OutcomeStatus.APPLIED,
                            raw=raw_value, value=str(value))

    def _validate(self, key: str, raw: Optional[str]) -> Optional[int]:
        n = parse_int(raw)
        if n is None:
            return None
        lo, hi = self._bounds[key]
        if not lo <= n <= hi:
            return None
        return n
