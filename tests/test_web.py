"""Tests für die Flask-Routen und die Formular-Dekodierung."""

import logging

import pytest

from models.outcome import OutcomeStatus, WriteReport
from schedule.block_generator import BlockSpec
from web.app import create_app
from web.forms import decode_block_spec, decode_blocks_form, decode_cell_fields, decode_room_names


@pytest.fixture
def client(cache, app_config):
    app = create_app(cache, app_config)
    app.testing = True
    return app.test_client()


# ─── FORMULARE ────────────────────────────────────────────────────────────────

class TestForms:
    def test_block_spec_one_based_keys(self):
        """start_<n>/end_<n> sind 1-basiert, BlockSpec 0-basiert."""
        spec = decode_block_spec({"start_1": "09:00", "end_2": "11:00", "start_3": ""}, 3)
        assert spec.count == 3
        assert spec.starts == {0: "09:00"}
        assert spec.ends == {1: "11:00"}

    def test_overrides_beyond_count_ignored(self):
        spec = decode_block_spec({"start_5": "12:00"}, 2)
        assert spec.starts == {}

    def test_cell_fields(self):
        cells = decode_cell_fields({
            "title_1_0": " Keynote ",
            "presenter_1_0": "Ada",
            "desc_2_3": "Text",
            "title_x_0": "kaputt",
            "other": "egal",
        })
        assert set(cells) == {(1, 0), (2, 3)}
        assert cells[(1, 0)].title == "Keynote"
        assert cells[(1, 0)].presenter == "Ada"
        assert cells[(2, 3)].description == "Text"

    def test_room_names(self):
        assert decode_room_names({"roomname_2": "Labor", "roomname_": "x"}) == {2: "Labor"}

    def test_blocks_form_counts_clamped(self, defaults):
        report = WriteReport()
        form = decode_blocks_form(
            {"num_classrooms": "99", "block_count": "0", "session_length": "60"},
            defaults, report,
        )
        assert form.classroom_count == 30
        assert form.block_spec.count == 1
        assert form.settings_update["session_length_minutes"] == "60"
        assert form.settings_update["break_minutes"] is None
        assert report.get("num_classrooms").status == OutcomeStatus.CLAMPED
        assert report.get("block_count").status == OutcomeStatus.CLAMPED


# ─── LESEN ────────────────────────────────────────────────────────────────────

class TestReadRoutes:
    def test_index_without_classrooms(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "Noch keine Räume" in resp.get_data(as_text=True)

    def test_index_lists_classrooms(self, client, cache):
        cache.replace_all(2, BlockSpec(count=2))
        html = client.get("/").get_data(as_text=True)
        assert "Classroom 1" in html
        assert "Classroom 2" in html
        assert "08:00–08:45" in html

    def test_classroom_page(self, client, cache):
        cache.replace_all(1, BlockSpec(count=1))
        cache.save_content(names={1: "Aula"})
        resp = client.get("/classroom/1")
        assert resp.status_code == 200
        assert "Aula" in resp.get_data(as_text=True)

    def test_unknown_classroom_404(self, client):
        assert client.get("/classroom/42").status_code == 404

    def test_blocks_page_shows_placeholders(self, client):
        html = client.get("/blocks").get_data(as_text=True)
        assert 'name="num_classrooms"' in html
        assert 'value="3"' in html
        assert 'name="start_5"' in html

    def test_config_page(self, client):
        html = client.get("/config").get_data(as_text=True)
        assert 'name="roomname_3"' in html
        assert 'name="title_1_4"' in html

    def test_config_page_cells_follow_blocks(self, client, cache):
        """Block 1 beginnt nach Block 2: Formularfelder bleiben beim Block."""
        from schedule.cache import CellContent

        cache.replace_all(1, BlockSpec(count=2, starts={0: "10:00", 1: "08:00"}),
                          cell_fields={(1, 0): CellContent(title="Erster"),
                                       (1, 1): CellContent(title="Zweiter")})
        html = client.get("/config").get_data(as_text=True)
        assert 'name="title_1_0" value="Erster"' in html
        assert 'name="title_1_1" value="Zweiter"' in html

    def test_api_schedule(self, client, cache):
        cache.replace_all(2, BlockSpec(count=3))
        data = client.get("/api/schedule").get_json()
        assert len(data["classrooms"]) == 2
        assert len(data["blocks"]) == 3
        assert data["settings"]["break_minutes"] == 15


# ─── SCHREIBEN ────────────────────────────────────────────────────────────────

class TestWriteRoutes:
    def test_blocks_save(self, client, cache):
        """POST /blocks/save baut das Raster neu auf und leitet um."""
        resp = client.post("/blocks/save", data={
            "num_classrooms": "2",
            "block_count": "3",
            "session_length": "60",
            "break_minutes": "10",
            "start_1": "09:00",
        })
        assert resp.status_code == 303
        assert resp.headers["Location"].endswith("/blocks")
        snap = cache.read_snapshot()
        assert len(snap.classrooms) == 2
        assert [(b.start_time, b.end_time) for b in snap.blocks] == [
            ("09:00", "10:00"), ("10:10", "11:10"), ("11:20", "12:20")]
        assert snap.total_sessions == 6

    def test_blocks_save_keeps_content(self, client, cache):
        """Die versteckten Inhaltsfelder überleben eine Änderung des Rasters."""
        client.post("/config/save", data={"title_1_0": "Keynote", "roomname_1": "Aula"})
        form = {"num_classrooms": "3", "block_count": "5",
                "session_length": "45", "break_minutes": "15",
                "title_1_0": "Keynote"}
        client.post("/blocks/save", data=form)
        snap = cache.read_snapshot()
        assert snap.sessions_for(1)[0].title == "Keynote"
        assert snap.classroom(1).name == "Aula"

    def test_blocks_save_invalid_input(self, client, cache):
        """Ungültige Werte führen nie zu einem Fehler."""
        resp = client.post("/blocks/save", data={
            "num_classrooms": "abc",
            "block_count": "500",
            "session_length": "5",
            "start_2": "später",
        })
        assert resp.status_code == 303
        snap = cache.read_snapshot()
        assert len(snap.classrooms) == 1
        assert len(snap.blocks) == 20
        assert snap.settings.session_length_minutes == 45

    def test_config_save(self, client, cache):
        resp = client.post("/config/save", data={
            "roomname_2": "Labor",
            "title_2_1": " Workshop ",
            "presenter_2_1": "Grace",
            "desc_2_1": "Hands-on",
        })
        assert resp.status_code == 303
        snap = cache.read_snapshot()
        session = snap.sessions_for(2)[1]
        assert snap.classroom(2).name == "Labor"
        assert (session.title, session.presenter, session.description) == (
            "Workshop", "Grace", "Hands-on")

    def test_blocks_save_with_reversed_starts(self, client, cache):
        """Die versteckten Felder von /blocks tragen den Block-Index, nicht die Zeitfolge."""
        from schedule.cache import CellContent

        cache.replace_all(1, BlockSpec(count=2, starts={0: "10:00", 1: "08:00"}),
                          cell_fields={(1, 0): CellContent(title="Erster"),
                                       (1, 1): CellContent(title="Zweiter")})
        html = client.get("/blocks").get_data(as_text=True)
        assert 'name="title_1_0" value="Erster"' in html

        client.post("/blocks/save", data={
            "num_classrooms": "1", "block_count": "2",
            "start_1": "10:00", "start_2": "08:00",
            "title_1_0": "Erster", "title_1_1": "Zweiter",
        })
        snap = cache.read_snapshot()
        assert [s.title for s in snap.cells_for(1)] == ["Erster", "Zweiter"]

    def test_request_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="web.app"):
            client.get("/blocks")
        assert "/blocks" in caplog.text
