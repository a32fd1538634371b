"""Tests für die CLI (click CliRunner)."""

import csv
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from config.manager import ConfigManager
from main import cli


@pytest.fixture
def config_file(tmp_path: Path, app_config) -> Path:
    """Konfiguration mit Datenbank im tmp_path."""
    return ConfigManager(tmp_path / "app_config.yaml").save(app_config)


def _run(config_file: Path, *args):
    return CliRunner().invoke(cli, ["--config", str(config_file), *args], obj={})


# ─── BLOCKS PREVIEW ───────────────────────────────────────────────────────────

class TestBlocksPreview:
    def test_defaults(self, config_file):
        result = _run(config_file, "blocks", "preview", "-n", "2")
        assert result.exit_code == 0, result.output
        assert "08:45" in result.output
        assert "09:00" in result.output

    def test_zero_break_is_used(self, config_file):
        """-b 0 bedeutet keine Pause, nicht die Default-Pause."""
        result = _run(config_file, "blocks", "preview", "-n", "2", "-b", "0")
        assert result.exit_code == 0, result.output
        assert "09:30" in result.output

    @pytest.mark.parametrize("args", [
        ["-l", "5"], ["-l", "0"], ["-l", "301"], ["-b", "121"],
    ])
    def test_out_of_bounds_rejected(self, config_file, args):
        """Werte außerhalb der konfigurierten Grenzen → Usage-Fehler."""
        result = _run(config_file, "blocks", "preview", *args)
        assert result.exit_code == 2
        assert "außerhalb" in result.output


# ─── IMPORT / CONVERT-CSV ─────────────────────────────────────────────────────

def _write_programm(path: Path) -> Path:
    rows = [
        ["9:25AM - 10:10AM", "Round 1", "Intro CAD"] + [""] * 9,
        ["10:20AM - 11:05AM", "Round 2", "", "Scouting"] + [""] * 8,
    ]
    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f).writerows(rows)
    return path


class TestCsvCommands:
    def test_convert_csv(self, tmp_path: Path, config_file):
        source = _write_programm(tmp_path / "programm.csv")
        result = _run(config_file, "convert-csv", str(source), "--event", "Jumpstart")
        assert result.exit_code == 0, result.output
        data = json.loads((tmp_path / "programm.json").read_text(encoding="utf-8"))
        assert data["event"] == "Jumpstart"
        assert [s["title"] for s in data["sessions"]] == ["Intro CAD", "Scouting"]

    def test_import_csv(self, tmp_path: Path, config_file, app_config):
        from schedule.cache import ScheduleCache
        from storage.database import Database
        from storage.persistence import PersistenceAdapter

        source = _write_programm(tmp_path / "programm.csv")
        result = _run(config_file, "import", str(source), "--replace")
        assert result.exit_code == 0, result.output

        persistence = PersistenceAdapter(
            Database(app_config.storage.database_path), app_config.schedule)
        snap = ScheduleCache.bootstrap(persistence, app_config.schedule).read_snapshot()
        assert [c.name for c in snap.classrooms] == ["Voyageurs South", "Voyageurs North"]
        assert len(snap.blocks) == 2
        assert snap.cell(2, 1).title == "Scouting"

    def test_convert_empty_csv_fails(self, tmp_path: Path, config_file):
        source = tmp_path / "leer.csv"
        source.write_text("Zeit,Programm,Raum\n", encoding="utf-8")
        result = _run(config_file, "convert-csv", str(source))
        assert result.exit_code == 1
