"""HTTP-Oberfläche (Flask): Lesesicht und Formular-Schreibpfad."""

from .app import create_app

__all__ = ["create_app"]
