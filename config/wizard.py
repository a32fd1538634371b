"""Interaktiver Setup-Wizard für die Ersteinrichtung des Raumplaners.

Führt den Nutzer durch Veranstaltung, Zeitraster, Server und Datenbank.
Nutzt rich für schöne Konsolenausgabe.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.schema import (
    AppConfig,
    ScheduleDefaults,
    ServerConfig,
    StorageConfig,
)
from config.defaults import default_schedule

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {text}")


def _show_seed_blocks_table(sd: ScheduleDefaults) -> None:
    """Zeigt die Standard-Blöcke als rich-Tabelle an."""
    table = Table(title="Standard-Blöcke", box=box.ROUNDED)
    table.add_column("Block", style="bold", width=6)
    table.add_column("Beginn", width=8)
    table.add_column("Ende", width=8)
    for i, b in enumerate(sd.seed_blocks, 1):
        table.add_row(str(i), b.start_time, b.end_time)
    console.print(table)


# ─── SCHRITT 1: Veranstaltung ───

def _wizard_event() -> tuple[str, Optional[str]]:
    _header("Schritt 1 — Veranstaltung")
    name = Prompt.ask("Name der Veranstaltung", default="Session-Raumplaner")
    location = Prompt.ask("Veranstaltungsort (leer = keiner)", default="")
    return name, (location or None)


# ─── SCHRITT 2: Zeitraster ───

def _wizard_schedule() -> ScheduleDefaults:
    _header("Schritt 2 — Zeitraster")
    default_sd = default_schedule()
    _show_seed_blocks_table(default_sd)
    _info(
        f"Sessionlänge {default_sd.session_length_minutes} Min., "
        f"Pause {default_sd.break_minutes} Min."
    )

    if Confirm.ask("Standard-Zeitraster übernehmen?", default=True):
        _success("Standard-Zeitraster übernommen.")
        return default_sd

    length = IntPrompt.ask("Sessionlänge (Minuten, 20–300)",
                           default=default_sd.session_length_minutes)
    pause = IntPrompt.ask("Pause zwischen Blöcken (Minuten, 0–120)",
                          default=default_sd.break_minutes)
    first = Prompt.ask("Beginn des ersten Blocks (HH:MM)",
                       default=default_sd.first_start)

    try:
        sd = default_sd.model_copy(update={
            "session_length_minutes": length,
            "break_minutes": pause,
            "first_start": first,
        })
        # model_copy validiert nicht, daher explizit
        sd = ScheduleDefaults.model_validate(sd.model_dump())
        _success("Zeitraster konfiguriert und validiert.")
        return sd
    except Exception as e:
        _warn(f"Validierungsfehler: {e}")
        _warn("Standard-Zeitraster wird verwendet.")
        return default_sd


# ─── SCHRITT 3: Server & Datenbank ───

def _wizard_server() -> ServerConfig:
    _header("Schritt 3 — HTTP-Server")
    host = Prompt.ask("Bind-Adresse", default="127.0.0.1")
    port = IntPrompt.ask("Port", default=8080)
    try:
        return ServerConfig(host=host, port=port)
    except Exception as e:
        _warn(f"Validierungsfehler: {e}")
        return ServerConfig()


def _wizard_storage() -> StorageConfig:
    _header("Schritt 4 — Datenbank")
    path = Prompt.ask("Pfad zur SQLite-Datei", default="scheduler.db")
    return StorageConfig(database_path=path)


# ─── ZUSAMMENFASSUNG ───

def _show_summary(config: AppConfig) -> None:
    _header("Zusammenfassung")
    table = Table(box=box.ROUNDED, title="Konfigurationsübersicht")
    table.add_column("Bereich", style="bold cyan")
    table.add_column("Wert")

    sd = config.schedule
    table.add_row("Veranstaltung", config.event_name)
    table.add_row("Ort", config.location or "—")
    table.add_row(
        "Zeitraster",
        f"{sd.session_length_minutes} Min. Session, {sd.break_minutes} Min. Pause, "
        f"Start {sd.first_start}"
    )
    table.add_row("Standard-Blöcke", str(len(sd.seed_blocks)))
    table.add_row("Server", f"http://{config.server.host}:{config.server.port}")
    table.add_row("Datenbank", config.storage.database_path)
    console.print(table)


# ─── HAUPT-WIZARD ───

def run_wizard() -> Optional[AppConfig]:
    """Führt den interaktiven Setup-Wizard aus.

    Returns:
        Fertige AppConfig oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Willkommen beim Session-Raumplaner![/bold]\n\n"
        "Der Wizard führt Sie durch alle Konfigurationsbereiche.\n"
        "[dim]Standard-Werte können mit Enter übernommen werden.[/dim]",
        title="[bold cyan]Session-Raumplaner[/bold cyan]",
        border_style="cyan",
    ))

    if not Confirm.ask("\nMöchten Sie jetzt einrichten?", default=True):
        console.print("[yellow]Einrichtung abgebrochen.[/yellow]")
        return None

    try:
        name, location = _wizard_event()
        schedule = _wizard_schedule()
        server = _wizard_server()
        storage = _wizard_storage()

        config = AppConfig(
            event_name=name,
            location=location,
            schedule=schedule,
            server=server,
            storage=storage,
        )

        _show_summary(config)

        if not Confirm.ask("\nKonfiguration speichern?", default=True):
            console.print("[yellow]Konfiguration wird nicht gespeichert.[/yellow]")
            return None

        return config

    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None
