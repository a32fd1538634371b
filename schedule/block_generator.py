"""Block-Generator: erzeugt die geordnete Folge der Zeitblöcke.

Kaskaden-Regel: Jeder Block ohne expliziten Beginn startet am Ende des
vorherigen Blocks plus Pause, auch wenn dieses Ende selbst manuell
überschrieben wurde.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from models.block import Block
from models.outcome import FieldOutcome, OutcomeStatus, WriteReport
from models.settings import Settings
from schedule.timeutil import format_hhmm, parse_hhmm

logger = logging.getLogger(__name__)

DEFAULT_FIRST_START = "08:00"
MAX_BLOCKS = 20


class BlockSpec(BaseModel):
    """Anforderung an den Generator.

    starts/ends sind 0-basiert nach Block-Index; fehlende oder leere
    Einträge bedeuten "Default-Regel anwenden".
    """

    count: int
    starts: dict[int, str] = Field(default_factory=dict)
    ends: dict[int, str] = Field(default_factory=dict)


def clamp_count(value: int, lo: int, hi: int) -> int:
    """Klemmt value auf [lo, hi]."""
    return max(lo, min(hi, value))


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Parst eine Ganzzahl aus einem Formularwert; None bei Fehler."""
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def parse_clamped(
    field: str, raw: Optional[str], lo: int, hi: int,
    report: Optional[WriteReport] = None,
) -> int:
    """Parst und klemmt einen Zähler aus dem Formular.

    Ungültige Werte zählen als 0 und werden damit auf lo geklemmt.
    """
    parsed = parse_int(raw)
    value = clamp_count(parsed if parsed is not None else 0, lo, hi)
    if report is not None:
        if parsed is None:
            status = OutcomeStatus.DEFAULTED
        elif parsed != value:
            status = OutcomeStatus.CLAMPED
        else:
            status = OutcomeStatus.APPLIED
        report.add(FieldOutcome(field=field, status=status, raw=raw, value=str(value)))
    return value


def generate_blocks(
    spec: BlockSpec,
    settings: Settings,
    first_start: str = DEFAULT_FIRST_START,
    max_blocks: int = MAX_BLOCKS,
    report: Optional[WriteReport] = None,
) -> list[Block]:
    """Erzeugt exakt N Blöcke (N = spec.count, geklemmt auf [1, max_blocks]).

    Für Index i:
    1. Beginn: expliziter Start, falls parsebar; sonst first_start für i == 0;
       sonst Ende(i-1) + Pause.
    2. Ende: explizites Ende, falls parsebar; sonst Beginn + Sessionlänge.
    3. id = i + 1, das Ende wird zum prev_end des nächsten Blocks.

    Überlappende oder rückwärts laufende Blöcke durch inkonsistente
    Overrides werden unverändert übernommen.
    """
    count = clamp_count(spec.count, 1, max_blocks)
    if count != spec.count:
        logger.debug(f"Blockanzahl {spec.count} auf {count} geklemmt")

    first = parse_hhmm(first_start)
    if first is None:
        raise ValueError(f"Ungültige Startzeit: {first_start!r}")

    blocks: list[Block] = []
    prev_end = first
    for i in range(count):
        start = _resolve(
            f"start_{i + 1}", spec.starts.get(i),
            first if i == 0 else prev_end + settings.break_minutes,
            report,
        )
        end = _resolve(
            f"end_{i + 1}", spec.ends.get(i),
            start + settings.session_length_minutes,
            report,
        )
        blocks.append(Block(id=i + 1, start_time=format_hhmm(start),
                            end_time=format_hhmm(end)))
        prev_end = end

    return blocks


def _resolve(
    field: str, raw: Optional[str], fallback: int,
    report: Optional[WriteReport],
) -> int:
    """Expliziter Wert, falls parsebar; sonst fallback."""
    explicit = parse_hhmm(raw)
    if explicit is not None:
        if report is not None:
            report.add(FieldOutcome(field=field, status=OutcomeStatus.APPLIED,
                                    raw=raw, value=format_hhmm(explicit)))
        return explicit
    if report is not None and raw is not None and str(raw).strip():
        report.add(FieldOutcome(field=field, status=OutcomeStatus.DEFAULTED,
                                raw=raw, value=format_hhmm(fallback)))
    return fallback
