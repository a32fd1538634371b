"""Gemeinsame Fixtures: Datenbank im tmp_path, Persistenz, Cache."""

from pathlib import Path

import pytest

from config.defaults import default_app_config, default_schedule
from config.schema import AppConfig, ScheduleDefaults
from schedule.cache import ScheduleCache
from storage.database import Database
from storage.persistence import PersistenceAdapter


@pytest.fixture
def defaults() -> ScheduleDefaults:
    return default_schedule()


@pytest.fixture
def db(tmp_path: Path) -> Database:
    return Database(tmp_path / "scheduler.db")


@pytest.fixture
def persistence(db: Database, defaults: ScheduleDefaults) -> PersistenceAdapter:
    adapter = PersistenceAdapter(db, defaults)
    adapter.initialize()
    return adapter


@pytest.fixture
def cache(persistence: PersistenceAdapter, defaults: ScheduleDefaults) -> ScheduleCache:
    return ScheduleCache.bootstrap(persistence, defaults)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    config = default_app_config()
    config.storage.database_path = str(tmp_path / "scheduler.db")
    return config
