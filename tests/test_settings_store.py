"""Tests für den Settings-Store (Sessionlänge und Pause)."""

import pytest

from config.defaults import SETTING_BREAK_MINUTES, SETTING_SESSION_LENGTH
from models.outcome import OutcomeStatus
from schedule.settings_store import SettingsStore


@pytest.fixture
def store(persistence, defaults) -> SettingsStore:
    s = SettingsStore(persistence, defaults)
    s.load()
    return s


class TestSettingsLoad:
    def test_defaults_persisted_on_first_load(self, persistence, store):
        """Fehlende Schlüssel werden mit dem Default belegt und gespeichert."""
        assert store.current.session_length_minutes == 45
        assert store.current.break_minutes == 15
        assert persistence.get_setting(SETTING_SESSION_LENGTH) == "45"
        assert persistence.get_setting(SETTING_BREAK_MINUTES) == "15"

    def test_stored_values_win(self, persistence, defaults):
        persistence.set_setting(SETTING_SESSION_LENGTH, "60")
        persistence.set_setting(SETTING_BREAK_MINUTES, "5")
        store = SettingsStore(persistence, defaults)
        assert store.load() == (60, 5)

    def test_invalid_stored_value_ignored(self, persistence, defaults):
        """Ungültige gespeicherte Werte → Default."""
        persistence.set_setting(SETTING_SESSION_LENGTH, "999")
        persistence.set_setting(SETTING_BREAK_MINUTES, "viel")
        store = SettingsStore(persistence, defaults)
        assert store.load() == (45, 15)


class TestSettingsUpdate:
    def test_valid_update_round_trip(self, persistence, defaults, store):
        """Gültiger Wert wird übernommen und überlebt einen Neustart."""
        outcome = store.update(SETTING_SESSION_LENGTH, "200")
        assert outcome.status == OutcomeStatus.APPLIED
        assert store.current.session_length_minutes == 200

        reloaded = SettingsStore(persistence, defaults)
        assert reloaded.load() == (200, 15)

    def test_below_minimum_rejected(self, persistence, store):
        """5 Minuten liegt unter 20 → verworfen, alter Wert bleibt."""
        outcome = store.update(SETTING_SESSION_LENGTH, "5")
        assert outcome.status == OutcomeStatus.REJECTED
        assert outcome.value == "45"
        assert store.current.session_length_minutes == 45
        assert persistence.get_setting(SETTING_SESSION_LENGTH) == "45"

    @pytest.mark.parametrize("key,raw,ok", [
        (SETTING_SESSION_LENGTH, "20", True),
        (SETTING_SESSION_LENGTH, "300", True),
        (SETTING_SESSION_LENGTH, "301", False),
        (SETTING_BREAK_MINUTES, "0", True),
        (SETTING_BREAK_MINUTES, "120", True),
        (SETTING_BREAK_MINUTES, "121", False),
        (SETTING_BREAK_MINUTES, "-1", False),
    ])
    def test_bounds(self, store, key, raw, ok):
        outcome = store.update(key, raw)
        expected = OutcomeStatus.APPLIED if ok else OutcomeStatus.REJECTED
        assert outcome.status == expected

    def test_unparseable_rejected(self, store):
        assert store.update(SETTING_BREAK_MINUTES, "zehn").status == OutcomeStatus.REJECTED
        assert store.current.break_minutes == 15

    def test_unknown_key_rejected(self, store):
        outcome = store.update("colour", "blue")
        assert outcome.status == OutcomeStatus.REJECTED
        assert store.current.session_length_minutes == 45
