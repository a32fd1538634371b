"""Flask-App: Routen für Übersicht, Raumansicht, Blockeditor und Inhalte.

Alle Handler lesen über ScheduleCache.read_snapshot(); das Rendern findet
nach Freigabe des Locks statt.
"""

import logging
import time
from datetime import date

from flask import Flask, abort, current_app, g, jsonify, redirect, render_template, request, url_for

from config.schema import AppConfig
from models.classroom import Classroom
from models.outcome import WriteReport
from schedule.cache import ScheduleCache
from web.forms import decode_blocks_form, decode_cell_fields, decode_room_names

logger = logging.getLogger(__name__)

CACHE_KEY = "schedule_cache"
CONFIG_KEY = "app_config"


def _cache() -> ScheduleCache:
    return current_app.extensions[CACHE_KEY]


def _config() -> AppConfig:
    return current_app.extensions[CONFIG_KEY]


def _log_adjusted(report: WriteReport, route: str) -> None:
    for outcome in report.adjusted:
        logger.info(f"{route}: {outcome}")
    if not report.persisted:
        logger.warning(f"{route}: Cache aktualisiert, Datenbank nicht vollständig geschrieben")


def create_app(cache: ScheduleCache, config: AppConfig) -> Flask:
    """Erzeugt die Flask-App mit injiziertem Cache."""
    app = Flask(__name__)
    app.extensions[CACHE_KEY] = cache
    app.extensions[CONFIG_KEY] = config

    @app.context_processor
    def _layout_context():
        return {
            "event_name": config.event_name,
            "location": config.location,
            "year": date.today().year,
        }

    if config.logging.log_requests:
        @app.before_request
        def _start_timer():
            g.request_started = time.perf_counter()

        @app.after_request
        def _log_request(response):
            started = g.get("request_started")
            elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
            logger.info(
                f"{request.method:>5} | {request.path:<30} | "
                f"{response.status_code} | {elapsed_ms:.1f} ms"
            )
            return response

    # ─── Lesen ───

    @app.get("/")
    def index():
        snap = _cache().read_snapshot()
        return render_template("index.html", snapshot=snap, active="home")

    @app.get("/classroom/<int:classroom_id>")
    def classroom(classroom_id: int):
        snap = _cache().read_snapshot()
        room = snap.classroom(classroom_id)
        if room is None:
            abort(404)
        return render_template(
            "classroom.html",
            classroom=room,
            sessions=snap.sessions_for(classroom_id),
            active="",
        )

    @app.get("/blocks")
    def blocks():
        snap = _cache().read_snapshot()
        return render_template(
            "blocks.html",
            blocks=snap.blocks,
            block_count=len(snap.blocks),
            num_classrooms=len(snap.classrooms) or _config().schedule.placeholder_classrooms,
            session_length=snap.settings.session_length_minutes,
            break_minutes=snap.settings.break_minutes,
            cells=snap.cells_by_classroom,
            max_blocks=_config().schedule.max_blocks,
            max_classrooms=_config().schedule.max_classrooms,
            active="blocks",
        )

    @app.get("/config")
    def config_page():
        snap = _cache().read_snapshot()
        num = len(snap.classrooms) or _config().schedule.placeholder_classrooms
        existing = {c.id: c for c in snap.classrooms}
        rooms = [existing.get(i) or Classroom.with_default_name(i) for i in range(1, num + 1)]
        return render_template(
            "config.html",
            classrooms=rooms,
            cells=snap.cells_by_classroom,
            blocks=snap.blocks,
            active="config",
        )

    @app.get("/api/schedule")
    def api_schedule():
        snap = _cache().read_snapshot()
        return jsonify(snap.model_dump(mode="json"))

    # ─── Schreiben ───

    @app.post("/blocks/save")
    def blocks_save():
        report = WriteReport()
        form = decode_blocks_form(request.form, _config().schedule, report)
        _cache().replace_all(
            form.classroom_count,
            form.block_spec,
            settings_update=form.settings_update,
            cell_fields=form.cell_fields,
            report=report,
        )
        _log_adjusted(report, "/blocks/save")
        return redirect(url_for("blocks"), code=303)

    @app.post("/config/save")
    def config_save():
        report = _cache().save_content(
            names=decode_room_names(request.form),
            cell_fields=decode_cell_fields(request.form),
        )
        _log_adjusted(report, "/config/save")
        return redirect(url_for("config_page"), code=303)

    return app
