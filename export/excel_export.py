"""Excel-Export für das Raster (openpyxl)."""

from pathlib import Path

from models.snapshot import Snapshot

from export.helpers import COLORS, build_grid, format_session, today_str


class ExcelExporter:
    """Exportiert einen Snapshot: Übersichtsblatt + ein Blatt pro Raum."""

    # Spaltenbreiten (Excel-Einheiten)
    COL_NR_W   = 6
    COL_ZEIT_W = 15
    COL_ROOM_W = 28

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H  = 22
    ROW_SESSION_H = 48

    def __init__(self, snapshot: Snapshot, event_name: str = "Session-Raumplaner"):
        self.snapshot = snapshot
        self.event_name = event_name

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> None:
        """Erstellt die Excel-Datei mit allen Sheets."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_uebersicht(wb)
        for room in self.snapshot.classrooms:
            self._sheet_raum(wb, room.id)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self, wrap: bool = True):
        from openpyxl.styles import Alignment
        return Alignment(wrap_text=wrap, horizontal="center", vertical="center")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header_row(self, ws, headers: list[str], row: int = 1) -> None:
        from openpyxl.styles import Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = self._center_align(wrap=False)
            cell.border = border
        ws.row_dimensions[row].height = self.ROW_HEADER_H

    def _sheet_title(self, name: str) -> str:
        """Excel erlaubt max. 31 Zeichen und keine Sonderzeichen []:*?/\\."""
        for ch in "[]:*?/\\":
            name = name.replace(ch, "-")
        return name[:31]

    # ─── Blätter ──────────────────────────────────────────────────────────────

    def _sheet_uebersicht(self, wb) -> None:
        from openpyxl.utils import get_column_letter
        ws = wb.create_sheet("Übersicht")
        rooms = self.snapshot.classrooms

        ws.column_dimensions["A"].width = self.COL_NR_W
        ws.column_dimensions["B"].width = self.COL_ZEIT_W
        for col in range(3, 3 + len(rooms)):
            ws.column_dimensions[get_column_letter(col)].width = self.COL_ROOM_W

        self._write_header_row(ws, ["Block", "Zeit"] + [r.name for r in rooms])

        border = self._thin_border()
        for r, ((label, cells), block) in enumerate(
            zip(build_grid(self.snapshot), self.snapshot.blocks), 2
        ):
            ws.cell(row=r, column=1, value=block.id).border = border
            time_cell = ws.cell(row=r, column=2, value=label)
            time_cell.fill = self._fill(COLORS["time"])
            time_cell.border = border
            for c, session in enumerate(cells, 3):
                text = format_session(session)
                cell = ws.cell(row=r, column=c, value=text)
                cell.fill = self._fill(COLORS["session"] if text else COLORS["free"])
                cell.alignment = self._center_align()
                cell.border = border
            ws.row_dimensions[r].height = self.ROW_SESSION_H

        footer_row = len(self.snapshot.blocks) + 3
        ws.cell(row=footer_row, column=1,
                value=f"{self.event_name} – Stand {today_str()}")

    def _sheet_raum(self, wb, classroom_id: int) -> None:
        room = self.snapshot.classroom(classroom_id)
        ws = wb.create_sheet(self._sheet_title(f"{room.id} {room.name}"))
        ws.column_dimensions["A"].width = self.COL_ZEIT_W
        ws.column_dimensions["B"].width = self.COL_ROOM_W
        ws.column_dimensions["C"].width = self.COL_ROOM_W
        ws.column_dimensions["D"].width = self.COL_ROOM_W * 2

        self._write_header_row(ws, ["Zeit", "Titel", "Vortragende", "Beschreibung"])
        border = self._thin_border()
        for r, s in enumerate(self.snapshot.sessions_for(classroom_id), 2):
            values = [f"{s.start_time}–{s.end_time}", s.title, s.presenter, s.description]
            for c, value in enumerate(values, 1):
                cell = ws.cell(row=r, column=c, value=value)
                cell.border = border
                if c > 1:
                    from openpyxl.styles import Alignment
                    cell.alignment = Alignment(wrap_text=True, vertical="top")
