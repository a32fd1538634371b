"""Ergebnis der Formular-Auswertung pro Feld.

Ungültige Eingaben führen nie zu einem Fehler für den Aufrufer. Welche
Werte übernommen, geklemmt oder verworfen wurden, ist hier nachvollziehbar.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class OutcomeStatus(str, Enum):
    APPLIED = "applied"      # Wert übernommen
    CLAMPED = "clamped"      # Wert auf die Grenze gesetzt
    DEFAULTED = "defaulted"  # Wert fehlte oder war ungültig → Default-Regel
    REJECTED = "rejected"    # Wert verworfen, vorheriger Wert bleibt


class FieldOutcome(BaseModel):
    field: str
    status: OutcomeStatus
    raw: Optional[str] = None
    value: Optional[str] = None   # tatsächlich verwendeter Wert

    def __str__(self) -> str:
        return f"{self.field}: {self.status.value} ({self.raw!r} → {self.value!r})"


class WriteReport(BaseModel):
    """Sammelt die FieldOutcomes eines Schreibvorgangs."""

    outcomes: list[FieldOutcome] = []
    persisted: bool = True   # False, wenn das Zurückschreiben fehlschlug

    def add(self, outcome: FieldOutcome) -> FieldOutcome:
        self.outcomes.append(outcome)
        return outcome

    def by_status(self, status: OutcomeStatus) -> list[FieldOutcome]:
        return [o for o in self.outcomes if o.status == status]

    def get(self, field: str) -> Optional[FieldOutcome]:
        return next((o for o in self.outcomes if o.field == field), None)

    @property
    def adjusted(self) -> list[FieldOutcome]:
        """Alle Felder, die nicht unverändert übernommen wurden."""
        return [o for o in self.outcomes if o.status != OutcomeStatus.APPLIED]
