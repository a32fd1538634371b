"""PDF-Export der Gesamtübersicht (fpdf2, A4 quer)."""

from pathlib import Path

from fpdf import FPDF

from models.session import Session
from models.snapshot import Snapshot

from export.helpers import COLORS, hex_to_rgb, build_grid, format_session, today_str


def _latin1(text: str) -> str:
    """Built-in-Fonts kennen nur latin-1; Striche werden ersetzt."""
    for dash, repl in (("—", " - "), ("–", "-"), ("─", "-")):
        text = text.replace(dash, repl)
    return text.encode("latin-1", "replace").decode("latin-1")


# ─── Layout (mm / pt) ─────────────────────────────────────────────────────────
# Nutzbare Breite bei 10 mm Rand: 297 - 20 = 277 mm

_USABLE_W     = 277
_TOP          = 22.0
_BOTTOM       = 210 - 18
_W_BLOCK      = 10
_W_TIME       = 24
_ROOMS_PER_PAGE = 6
_H_HEAD       = 7
_H_ROW        = 16
_PT_HEAD      = 8
_PT_BODY      = 7
_LINE         = 3.5
_MAX_LINES    = 3


class _SchedulePdf(FPDF):
    """FPDF mit Kopfzeile (Veranstaltung | Seitentitel) und Fußzeile."""

    def __init__(self, event_name: str):
        super().__init__(orientation="L", unit="mm", format="A4")
        self.event_name = event_name
        self.page_title = ""
        self.set_auto_page_break(auto=False)
        self.set_margins(left=10, top=_TOP, right=10)

    def header(self):
        self.set_font("Helvetica", "B", 11)
        self.set_xy(10, 8)
        self.cell(140, 7, _latin1(self.event_name), align="L")
        self.cell(0, 7, _latin1(self.page_title), align="R")
        self.set_draw_color(150, 150, 150)
        self.line(10, 18, self.w - 10, 18)

    def footer(self):
        self.set_y(-14)
        self.set_font("Helvetica", "I", 7)
        self.cell(0, 8, f"Stand {today_str()}  |  Seite {self.page_no()}/{{nb}}", align="C")

    def grid_cell(self, x: float, y: float, w: float, h: float, text: str = "",
                  fill: str | None = None, bold: bool = False,
                  size: int = _PT_BODY, white: bool = False) -> None:
        """Rasterzelle: Hintergrund, grauer Rand, Text zeilenweise zentriert."""
        if fill:
            self.set_fill_color(*hex_to_rgb(fill))
            self.rect(x, y, w, h, style="F")
        self.set_draw_color(180, 180, 180)
        self.rect(x, y, w, h, style="D")
        lines = [ln for ln in _latin1(text).splitlines() if ln][:_MAX_LINES]
        if not lines:
            return
        self.set_font("Helvetica", "B" if bold else "", size)
        self.set_text_color(*((255, 255, 255) if white else (0, 0, 0)))
        width_chars = max(4, int(w / 1.6))
        top = y + max(1.0, (h - len(lines) * _LINE) / 2)
        for n, line in enumerate(lines):
            self.set_xy(x, top + n * _LINE)
            self.cell(w, _LINE, line[:width_chars], align="C")
        self.set_text_color(0, 0, 0)


class PdfExporter:
    """Exportiert die Gesamtübersicht (höchstens 6 Räume pro Seite)."""

    def __init__(self, snapshot: Snapshot, event_name: str = "Session-Raumplaner"):
        self.snapshot = snapshot
        self.event_name = event_name

    def export(self, output_path: Path) -> None:
        pdf = _SchedulePdf(self.event_name)
        rooms = self.snapshot.classrooms
        grid = build_grid(self.snapshot)
        pages = [rooms[i:i + _ROOMS_PER_PAGE]
                 for i in range(0, len(rooms), _ROOMS_PER_PAGE)] or [[]]

        for n, page_rooms in enumerate(pages):
            offset = n * _ROOMS_PER_PAGE
            names = [r.name for r in page_rooms]
            col_w = (_USABLE_W - _W_BLOCK - _W_TIME) / max(1, len(page_rooms))
            pdf.page_title = f"Übersicht {n + 1}/{len(pages)}"
            y = self._new_page(pdf, names, col_w)
            for block, (label, cells) in zip(self.snapshot.blocks, grid):
                if y + _H_ROW > _BOTTOM:
                    y = self._new_page(pdf, names, col_w)
                self._row(pdf, y, block.id, label,
                          cells[offset:offset + len(page_rooms)], col_w)
                y += _H_ROW

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(output_path))

    def _new_page(self, pdf: _SchedulePdf, names: list[str], col_w: float) -> float:
        """Neue Seite mit Spaltenköpfen; gibt die y-Position der ersten Zeile zurück."""
        pdf.add_page()
        x = 10.0
        for label, w in [("Block", _W_BLOCK), ("Zeit", _W_TIME)] + [(n, col_w) for n in names]:
            pdf.grid_cell(x, _TOP, w, _H_HEAD, label, fill=COLORS["header"],
                          bold=True, size=_PT_HEAD, white=True)
            x += w
        return _TOP + _H_HEAD

    def _row(self, pdf: _SchedulePdf, y: float, block_id: int, label: str,
             cells: list[Session | None], col_w: float) -> None:
        pdf.grid_cell(10.0, y, _W_BLOCK, _H_ROW, str(block_id), bold=True, size=_PT_HEAD)
        pdf.grid_cell(10.0 + _W_BLOCK, y, _W_TIME, _H_ROW,
                      label.replace("–", "\n"), fill=COLORS["time"])
        x = 10.0 + _W_BLOCK + _W_TIME
        for session in cells:
            text = format_session(session)
            pdf.grid_cell(x, y, col_w, _H_ROW, text,
                          fill=COLORS["session"] if text else COLORS["free"])
            x += col_w
