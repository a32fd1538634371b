"""Session-Raumplaner — Haupt-CLI.

Verwendung:
  python main.py setup                    Ersteinrichtung (Wizard)
  python main.py config show              Konfiguration anzeigen
  python main.py init-db                  Datenbank anlegen (Standard-Blöcke)
  python main.py serve                    HTTP-Server starten
  python main.py show [--classroom ID]    Raster im Terminal anzeigen
  python main.py blocks preview           Blockfolge berechnen (ohne Speichern)
  python main.py import <datei>           Veranstaltungsprogramm importieren (JSON/CSV)
  python main.py convert-csv <datei.csv>  CSV-Programm in JSON umwandeln
  python main.py export                   Excel + PDF exportieren
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()
logger = logging.getLogger("raumplaner")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _load_config(config_path: str | None):
    """Lädt die Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager(Path(config_path) if config_path else None)
    try:
        config = mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    _setup_logging(config.logging.level.value)
    return mgr, config


def _bootstrap_cache(config):
    """Lädt den Cache aus der Datenbank; Fehler sind fatal."""
    from schedule.cache import ScheduleCache
    from storage.database import Database, StorageError
    from storage.persistence import PersistenceAdapter

    persistence = PersistenceAdapter(Database(config.storage.database_path), config.schedule)
    try:
        return ScheduleCache.bootstrap(persistence, config.schedule)
    except StorageError as e:
        console.print(f"[red bold]Datenbank konnte nicht geladen werden:[/red bold]\n{e}")
        sys.exit(1)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.pass_context
def cmd_setup(ctx):
    """Ersteinrichtung: Konfiguration mit dem Setup-Wizard anlegen."""
    from config.wizard import run_wizard
    from config.manager import ConfigManager

    mgr = ConfigManager(Path(ctx.obj["config_path"]) if ctx.obj["config_path"] else None)
    if not mgr.first_run_check():
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]"
        )
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = run_wizard()
    if config is not None:
        mgr.save(config)
        console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
        console.print("Führen Sie jetzt [bold]python main.py serve[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx):
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config(ctx.obj["config_path"])
    source = mgr.path if not mgr.first_run_check() else "Defaults (keine Datei)"

    console.print(Panel(
        f"[bold]{config.event_name}[/bold]"
        + (f"  |  {config.location}" if config.location else "")
        + f"\n[dim]Quelle: {source}[/dim]",
        title="Konfiguration",
        border_style="cyan",
    ))

    sd = config.schedule
    table = Table(title="Standard-Blöcke", box=box.ROUNDED)
    table.add_column("Block")
    table.add_column("Beginn")
    table.add_column("Ende")
    for i, b in enumerate(sd.seed_blocks, 1):
        table.add_row(str(i), b.start_time, b.end_time)
    console.print(table)

    console.print(
        f"[bold]Zeitraster:[/bold] Session {sd.session_length_minutes} Min. | "
        f"Pause {sd.break_minutes} Min. | Start {sd.first_start} | "
        f"max. {sd.max_blocks} Blöcke, {sd.max_classrooms} Räume"
    )
    console.print(
        f"[bold]Server:[/bold] http://{config.server.host}:{config.server.port} | "
        f"[bold]Datenbank:[/bold] {config.storage.database_path}"
    )


# ─── INIT-DB ──────────────────────────────────────────────────────────────────

@click.command("init-db")
@click.pass_context
def cmd_init_db(ctx):
    """Legt die Tabellen an und speichert Standard-Blöcke und -Einstellungen."""
    mgr, config = _load_config(ctx.obj["config_path"])
    cache = _bootstrap_cache(config)
    counts = cache.persistence.db.table_counts()
    console.print(f"[green]✓[/green] Datenbank bereit: {config.storage.database_path}")
    for table, n in counts.items():
        console.print(f"  {table:12s} {n:5d} Zeilen")


# ─── SERVE ────────────────────────────────────────────────────────────────────

@click.command("serve")
@click.option("--host", default=None, help="Bind-Adresse (überschreibt Config).")
@click.option("--port", type=int, default=None, help="Port (überschreibt Config).")
@click.option("--debug", is_flag=True, default=False, help="Flask-Debugmodus.")
@click.pass_context
def cmd_serve(ctx, host: str | None, port: int | None, debug: bool):
    """Startet den HTTP-Server."""
    mgr, config = _load_config(ctx.obj["config_path"])
    cache = _bootstrap_cache(config)
    from web.app import create_app

    app = create_app(cache, config)
    host = host or config.server.host
    port = port or config.server.port

    logger.info(f"{config.event_name} (SQLite: {config.storage.database_path})")
    logger.info(f"    http://{host}:{port}")
    logger.info(f"    Zeitraster: http://{host}:{port}/blocks")
    app.run(host=host, port=port, debug=debug or config.server.debug,
            threaded=True, use_reloader=False)


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@click.command("show")
@click.option("--classroom", "classroom_id", type=int, default=None,
              help="Nur diesen Raum anzeigen.")
@click.pass_context
def cmd_show(ctx, classroom_id: int | None):
    """Zeigt das gespeicherte Raster im Terminal an."""
    from export.tui_renderer import render_classroom_rows, render_overview_rows

    mgr, config = _load_config(ctx.obj["config_path"])
    snap = _bootstrap_cache(config).read_snapshot()

    if classroom_id is not None:
        room = snap.classroom(classroom_id)
        if room is None:
            console.print(f"[red]Raum {classroom_id} existiert nicht.[/red]")
            sys.exit(1)
        table = Table(title=room.name, box=box.ROUNDED, show_lines=True)
        for col in ("Zeit", "Titel", "Vortragende", "Beschreibung"):
            table.add_column(col)
        for row in render_classroom_rows(snap, classroom_id):
            table.add_row(*row)
        console.print(table)
        return

    table = Table(title=config.event_name, box=box.ROUNDED, show_lines=True)
    table.add_column("Block", style="bold")
    table.add_column("Zeit")
    for room in snap.classrooms:
        table.add_column(room.name)
    for row in render_overview_rows(snap):
        table.add_row(*row)
    console.print(table)
    console.print(f"\n[dim]{snap.summary()}[/dim]")


# ─── BLOCKS ───────────────────────────────────────────────────────────────────

@click.group("blocks")
def cmd_blocks():
    """Zeitblöcke berechnen."""


@cmd_blocks.command("preview")
@click.option("--count", "-n", type=int, default=5, help="Anzahl Blöcke (1–20).")
@click.option("--session-length", "-l", type=int, default=None, help="Minuten (20–300).")
@click.option("--break-minutes", "-b", type=int, default=None, help="Minuten (0–120).")
@click.option("--start", "starts", multiple=True,
              help="Expliziter Beginn als NR=HH:MM (NR 1-basiert), mehrfach möglich.")
@click.option("--end", "ends", multiple=True,
              help="Explizites Ende als NR=HH:MM (NR 1-basiert), mehrfach möglich.")
@click.pass_context
def blocks_preview(ctx, count, session_length, break_minutes, starts, ends):
    """Zeigt die Blockfolge, die der Generator erzeugen würde (ohne Speichern)."""
    from models.outcome import WriteReport
    from models.settings import Settings
    from schedule.block_generator import BlockSpec, generate_blocks

    mgr, config = _load_config(ctx.obj["config_path"])
    sd = config.schedule

    def _overrides(values) -> dict[int, str]:
        result = {}
        for item in values:
            nr, _, hhmm = item.partition("=")
            try:
                result[int(nr) - 1] = hhmm
            except ValueError:
                raise click.BadParameter(f"Erwartet NR=HH:MM, erhalten: {item!r}")
        return result

    bounds = sd.bounds
    if session_length is None:
        session_length = sd.session_length_minutes
    elif not bounds.session_length_min <= session_length <= bounds.session_length_max:
        raise click.BadParameter(
            f"{session_length} liegt außerhalb "
            f"{bounds.session_length_min}–{bounds.session_length_max}",
            param_hint="--session-length")
    if break_minutes is None:
        break_minutes = sd.break_minutes
    elif not bounds.break_min <= break_minutes <= bounds.break_max:
        raise click.BadParameter(
            f"{break_minutes} liegt außerhalb {bounds.break_min}–{bounds.break_max}",
            param_hint="--break-minutes")

    settings = Settings(session_length_minutes=session_length, break_minutes=break_minutes)
    report = WriteReport()
    blocks = generate_blocks(
        BlockSpec(count=count, starts=_overrides(starts), ends=_overrides(ends)),
        settings, first_start=sd.first_start, max_blocks=sd.max_blocks, report=report,
    )

    table = Table(title="Blockfolge (Vorschau)", box=box.ROUNDED)
    table.add_column("Block", style="bold")
    table.add_column("Beginn")
    table.add_column("Ende")
    for b in blocks:
        table.add_row(str(b.id), b.start_time, b.end_time)
    console.print(table)
    for outcome in report.adjusted:
        console.print(f"[yellow]⚠[/yellow]  {outcome}")


# ─── IMPORT ───────────────────────────────────────────────────────────────────

@click.command("import")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@click.option("--replace", is_flag=True, default=False,
              help="Gespeicherten Zustand ohne Rückfrage ersetzen.")
@click.option("--event", default="", help="Veranstaltungsname (nur CSV).")
@click.option("--location", default="", help="Veranstaltungsort (nur CSV).")
@click.pass_context
def cmd_import(ctx, datei: Path, replace: bool, event: str, location: str):
    """Importiert ein Veranstaltungsprogramm (JSON oder CSV) und ersetzt das Raster."""
    from data.csv_import import CsvImportError, import_from_csv
    from data.json_import import JsonImportError, import_from_json

    mgr, config = _load_config(ctx.obj["config_path"])
    console.print(f"[bold]Importiere:[/bold] {datei}")
    try:
        if datei.suffix.lower() == ".csv":
            imported = import_from_csv(datei, config.schedule, event, location)
        else:
            imported = import_from_json(datei, config.schedule)
    except (CsvImportError, JsonImportError) as e:
        console.print(f"[red bold]Import fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)

    console.print(f"\n{imported.summary()}")
    for msg in imported.skipped:
        console.print(f"  [yellow]• {msg}[/yellow]")

    if not replace and not click.confirm("\nGespeicherte Räume, Blöcke und Sessions ersetzen?",
                                     default=False):
        console.print("[yellow]Abgebrochen.[/yellow]")
        return

    cache = _bootstrap_cache(config)
    if cache.load_imported(imported.classrooms, imported.blocks, imported.sessions):
        console.print(f"[green]✓[/green] Import gespeichert: {config.storage.database_path}")
    else:
        console.print("[red]Import nur teilweise gespeichert – siehe Log.[/red]")
        sys.exit(1)


@click.command("convert-csv")
@click.argument("csv_datei", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "json_path", type=click.Path(path_type=Path), default=None,
              help="Ausgabedatei (Default: wie die CSV-Datei, Endung .json).")
@click.option("--event", default="", help="Veranstaltungsname.")
@click.option("--location", default="", help="Veranstaltungsort.")
@click.pass_context
def cmd_convert_csv(ctx, csv_datei: Path, json_path: Path | None, event: str, location: str):
    """Wandelt eine Programm-Tabelle (CSV) in eine importierbare JSON-Datei um."""
    from data.csv_import import CsvImportError, convert_csv, write_event_json

    _load_config(ctx.obj["config_path"])
    json_path = json_path or csv_datei.with_suffix(".json")
    try:
        payload = convert_csv(csv_datei, event, location)
    except CsvImportError as e:
        console.print(f"[red bold]Konvertierung fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)
    write_event_json(payload, json_path)
    console.print(
        f"[green]✓[/green] {len(payload['sessions'])} Sessions gespeichert: {json_path}")


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@click.option("--excel", "excel_path", default="output/raster.xlsx",
              help="Ausgabepfad für die Excel-Datei.")
@click.option("--pdf", "pdf_path", default="output/raster.pdf",
              help="Ausgabepfad für die PDF-Datei.")
@click.option("--no-pdf", is_flag=True, default=False, help="Keine PDF erzeugen.")
@click.pass_context
def cmd_export(ctx, excel_path: str, pdf_path: str, no_pdf: bool):
    """Exportiert das Raster als Excel und PDF."""
    from export.excel_export import ExcelExporter
    from export.pdf_export import PdfExporter

    mgr, config = _load_config(ctx.obj["config_path"])
    snap = _bootstrap_cache(config).read_snapshot()

    ExcelExporter(snap, config.event_name).export(Path(excel_path))
    console.print(f"[green]✓[/green] Excel gespeichert: {excel_path}")
    if not no_pdf:
        PdfExporter(snap, config.event_name).export(Path(pdf_path))
        console.print(f"[green]✓[/green] PDF gespeichert: {pdf_path}")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", default=None,
              help="Pfad zur Konfigurationsdatei (Default: config/app_config.yaml).")
@click.pass_context
def cli(ctx, config_path: str | None):
    """Session-Raumplaner: Sessions auf Räume und Zeitblöcke verteilen.

    Starten Sie mit: python main.py setup
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


def main():
    cli(obj={})


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_init_db)
cli.add_command(cmd_serve)
cli.add_command(cmd_show)
cli.add_command(cmd_blocks)
cli.add_command(cmd_import)
cli.add_command(cmd_convert_csv)
cli.add_command(cmd_export)


if __name__ == "__main__":
    main()
