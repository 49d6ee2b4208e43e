from __future__ import annotations

import base64
import io
from typing import Any, Dict, List, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from planner.config.constants import COLUMN_LABELS, COLUMN_WIDTHS
from planner.plan.models import Day, ExerciseRow, Plan

LAYOUT_SHEETS = "sheets"
LAYOUT_SINGLE = "single"

_HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFCBD3DC")
_THIN = Side(style="thin", color="FF9AA0A6")
_BORDER = Border(top=_THIN, bottom=_THIN, left=_THIN, right=_THIN)
_TITLE_FONT = Font(size=14, bold=True)
_HEADER_FONT = Font(bold=True)
_INVALID_SHEET_CHARS = set('[]:*?/\\')

_HEADER_KEYS = {labels[0].strip().upper() for labels in COLUMN_LABELS.values()}


def _labels(lang: str) -> List[str]:
    return COLUMN_LABELS.get(lang, COLUMN_LABELS["pl"])


def _sheet_title(name: str, taken: set) -> str:
    base = "".join(ch for ch in name if ch not in _INVALID_SHEET_CHARS).strip()[:31] or "Plan"
    title = base
    counter = 2
    while title in taken:
        suffix = f" ({counter})"
        title = f"{base[: 31 - len(suffix)]}{suffix}"
        counter += 1
    taken.add(title)
    return title


def _row_values(row: ExerciseRow) -> List[Any]:
    return [
        row.exercise_name,
        row.sets,
        row.reps,
        row.rest,
        row.rir,
        row.rpe,
        row.tempo,
        row.comment,
    ]


def _text_cell(ws, row: int, column: int, value: Any):
    cell = ws.cell(row=row, column=column, value=value)
    if isinstance(value, str) and value.startswith("="):
        # stored as plain text, never as a formula
        cell.data_type = "s"
    return cell


def _write_day_table(ws, day: Day, start_row: int, lang: str) -> int:
    """Write title, header and exercise rows starting at ``start_row``; return the next free row."""
    width = len(COLUMN_WIDTHS)
    last_col = get_column_letter(width)
    ws.merge_cells(f"A{start_row}:{last_col}{start_row}")
    title = _text_cell(ws, start_row, 1, day.title)
    title.font = _TITLE_FONT
    title.alignment = Alignment(vertical="center", horizontal="left")

    header_row = start_row + 1
    for col, label in enumerate(_labels(lang), start=1):
        cell = ws.cell(row=header_row, column=col, value=label)
        cell.fill = _HEADER_FILL
        cell.font = _HEADER_FONT
        cell.border = _BORDER
        cell.alignment = Alignment(vertical="center", horizontal="center")

    current = header_row + 1
    for exercise in day.exercises:
        for col, value in enumerate(_row_values(exercise), start=1):
            cell = _text_cell(ws, current, col, value)
            cell.border = _BORDER
            if col == 1:
                cell.alignment = Alignment(wrap_text=True)
        current += 1
    return current


def _set_widths(ws) -> None:
    for col, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(col)].width = width


def build_workbook(plan: Plan, lang: str = "pl", layout: str = LAYOUT_SHEETS) -> Workbook:
    wb = Workbook()
    wb.properties.creator = "HybridPlanner"
    wb.properties.title = plan.name or None
    default_sheet = wb.active
    days = plan.training_days
    if layout == LAYOUT_SINGLE or not days:
        ws = default_sheet
        ws.title = _sheet_title(plan.name or "Plan", set())
        _set_widths(ws)
        row = 1
        for day in days:
            row = _write_day_table(ws, day, row, lang) + 1
        return wb

    taken: set = set()
    for day in days:
        ws = wb.create_sheet(_sheet_title(day.name, taken))
        _set_widths(ws)
        _write_day_table(ws, day, 1, lang)
        ws.freeze_panes = "A3"
    wb.remove(default_sheet)
    return wb


def workbook_bytes(wb: Workbook) -> bytes:
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def workbook_base64(plan: Plan, lang: str = "pl", layout: str = LAYOUT_SHEETS) -> str:
    return base64.b64encode(workbook_bytes(build_workbook(plan, lang=lang, layout=layout))).decode("ascii")


def _is_header(values: List[Any]) -> bool:
    first = values[0] if values else None
    return isinstance(first, str) and first.strip().upper() in _HEADER_KEYS


def _cell_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _split_title(title: Any) -> Dict[str, Optional[str]]:
    text = str(title or "").strip()
    if " · " in text:
        name, focus = text.split(" · ", 1)
        return {"name": name.strip(), "focus": focus.strip() or None}
    return {"name": text, "focus": None}


def read_workbook(data: bytes) -> Plan:
    """Re-read a workbook written by ``build_workbook`` (either layout)."""
    wb = load_workbook(io.BytesIO(data), data_only=True)
    days: List[Day] = []
    for ws in wb.worksheets:
        rows = [list(row) for row in ws.iter_rows(values_only=True)]
        current: Optional[Day] = None
        for index, values in enumerate(rows):
            if not values:
                continue
            if _is_header(values):
                title = rows[index - 1][0] if index > 0 and rows[index - 1] else ws.title
                current = Day(**_split_title(title))
                days.append(current)
                continue
            if current is None:
                continue
            name = _cell_text(values[0])
            if name is None:
                current = None
                continue
            padded = values + [None] * (len(COLUMN_WIDTHS) - len(values))
            current.exercises.append(
                ExerciseRow.from_dict(
                    {
                        "exercise": name,
                        "sets": padded[1],
                        "reps": padded[2],
                        "rest": padded[3],
                        "rir": padded[4],
                        "rpe": padded[5],
                        "tempo": padded[6],
                        "comment": padded[7],
                    }
                )
            )
    title = wb.properties.title or ""
    return Plan(name=title, days=days, source="workbook")
