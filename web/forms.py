"""Dekodierung der Formularfelder in Eingaben für den ScheduleCache.

Formularschlüssel:
  num_classrooms, block_count          Zähler (werden geklemmt)
  session_length, break_minutes        Einstellungen (optional)
  start_<n>, end_<n>                   Block-Overrides, n 1-basiert
  title_<raum>_<i>, presenter_<raum>_<i>, desc_<raum>_<i>
                                       Zelleninhalt, i 0-basiert (Block-Index)
  roomname_<raum>                      Raumname (nur /config/save)
"""

import re
from dataclasses import dataclass
from typing import Mapping, Optional

from config.defaults import SETTING_BREAK_MINUTES, SETTING_SESSION_LENGTH
from config.schema import ScheduleDefaults
from models.outcome import WriteReport
from schedule.block_generator import BlockSpec, parse_clamped
from schedule.cache import CellContent

_CELL_RE = re.compile(r"^(title|presenter|desc)_(\d+)_(\d+)$")
_ROOMNAME_RE = re.compile(r"^roomname_(\d+)$")

_CELL_ATTR = {"title": "title", "presenter": "presenter", "desc": "description"}


@dataclass
class BlocksForm:
    """Dekodiertes Formular von /blocks/save."""

    classroom_count: int
    block_spec: BlockSpec
    settings_update: dict[str, Optional[str]]
    cell_fields: dict[tuple[int, int], CellContent]


def decode_cell_fields(form: Mapping[str, str]) -> dict[tuple[int, int], CellContent]:
    """Sammelt alle title_/presenter_/desc_-Felder nach (Raum, Block-Index)."""
    raw: dict[tuple[int, int], dict[str, str]] = {}
    for key in form.keys():
        m = _CELL_RE.match(key)
        if not m:
            continue
        kind, cid, idx = m.group(1), int(m.group(2)), int(m.group(3))
        raw.setdefault((cid, idx), {})[_CELL_ATTR[kind]] = form.get(key) or ""
    return {k: CellContent(**v) for k, v in raw.items()}


def decode_room_names(form: Mapping[str, str]) -> dict[int, str]:
    names = {}
    for key in form.keys():
        m = _ROOMNAME_RE.match(key)
        if m:
            names[int(m.group(1))] = form.get(key) or ""
    return names


def decode_block_spec(form: Mapping[str, str], count: int) -> BlockSpec:
    """start_<n>/end_<n> (1-basiert) → BlockSpec mit 0-basierten Indizes."""
    starts, ends = {}, {}
    for i in range(count):
        start = form.get(f"start_{i + 1}")
        end = form.get(f"end_{i + 1}")
        if start:
            starts[i] = start
        if end:
            ends[i] = end
    return BlockSpec(count=count, starts=starts, ends=ends)


def decode_blocks_form(
    form: Mapping[str, str],
    defaults: ScheduleDefaults,
    report: Optional[WriteReport] = None,
) -> BlocksForm:
    """Dekodiert /blocks/save; Zähler werden geklemmt und im Report vermerkt."""
    classroom_count = parse_clamped(
        "num_classrooms", form.get("num_classrooms"), 1, defaults.max_classrooms, report)
    block_count = parse_clamped(
        "block_count", form.get("block_count"), 1, defaults.max_blocks, report)
    return BlocksForm(
        classroom_count=classroom_count,
        block_spec=decode_block_spec(form, block_count),
        settings_update={
            SETTING_SESSION_LENGTH: form.get("session_length"),
            SETTING_BREAK_MINUTES: form.get("break_minutes"),
        },
        cell_fields=decode_cell_fields(form),
    )
