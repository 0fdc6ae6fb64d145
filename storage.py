import logging
import zipfile
from typing import Any, List, Optional, Sequence, Tuple

import openpyxl
from openpyxl.formatting.formatting import ConditionalFormattingList
from openpyxl.formatting.rule import CellIsRule, ColorScaleRule
from openpyxl.styles import PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from errors import SheetNotFoundError, WorkbookError
from formatting import HIGH_COLOR, LOW_COLOR, MID_COLOR, SENTINEL_COLOR
from models import ColumnFormat

logger = logging.getLogger(__name__)

MIN_COLUMN_WIDTH = 8
MAX_COLUMN_WIDTH = 30


def _load_workbook(path: str, **kwargs):
    try:
        return openpyxl.load_workbook(path, **kwargs)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        logger.warning("Cannot open workbook %s: %s", path, e)
        raise WorkbookError(f"The file is not a readable .xlsx workbook: {path}")


def list_sheets(path: str) -> Tuple[List[str], Optional[str]]:
    wb = _load_workbook(path, read_only=True)
    try:
        active = wb.active.title if wb.active is not None else None
        return list(wb.sheetnames), active
    finally:
        wb.close()


def read_sheet_values(path: str, sheet_name: Optional[str] = None) -> Tuple[str, List[List[Any]]]:
    """Return the title and cell values of *sheet_name* (the active sheet if None).

    Formulas are read as their cached values and empty cells as "".
    """
    wb = _load_workbook(path, data_only=True)
    if sheet_name is None:
        ws = wb.active
    elif sheet_name in wb.sheetnames:
        ws = wb[sheet_name]
    else:
        raise SheetNotFoundError(sheet_name)

    values = [
        ["" if v is None else v for v in row]
        for row in ws.iter_rows(values_only=True)
    ]
    logger.info("Read %d rows from sheet %r of %s", len(values), ws.title, path)
    return ws.title, values


def _clear_sheet(ws) -> None:
    if ws.max_row:
        ws.delete_rows(1, ws.max_row)
    ws.conditional_formatting = ConditionalFormattingList()


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def apply_column_formats(ws, formats: Sequence[ColumnFormat]) -> None:
    """Replace the sheet's conditional formatting with one scale + sentinel rule per column."""
    ws.conditional_formatting = ConditionalFormattingList()
    for fmt in formats:
        letter = get_column_letter(fmt.column)
        rng = f"{letter}{fmt.first_row}:{letter}{fmt.last_row}"
        low, mid, high = fmt.gradient
        # Added first so it gets the higher priority and wins over the scale
        ws.conditional_formatting.add(rng, CellIsRule(
            operator="equal",
            formula=[f'"{fmt.sentinel}"'],
            stopIfTrue=True,
            fill=_solid(SENTINEL_COLOR),
        ))
        ws.conditional_formatting.add(rng, ColorScaleRule(
            start_type="num", start_value=low, start_color=LOW_COLOR,
            mid_type="num", mid_value=mid, mid_color=MID_COLOR,
            end_type="num", end_value=high, end_color=HIGH_COLOR,
        ))


def auto_column_widths(ws) -> None:
    for col_idx in range(1, ws.max_column + 1):
        max_w = 0
        for (value,) in ws.iter_rows(min_col=col_idx, max_col=col_idx, values_only=True):
            if value is not None:
                max_w = max(max_w, len(str(value)))
        width = max(min(max_w + 2, MAX_COLUMN_WIDTH), MIN_COLUMN_WIDTH)
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def write_rearranged(path: str, sheet_name: str, rows: Sequence[Sequence[Any]],
                     formats: Sequence[ColumnFormat]) -> None:
    """Write *rows* into *sheet_name*, replacing whatever the sheet held before."""
    wb = _load_workbook(path)
    if sheet_name in wb.sheetnames:
        ws = wb[sheet_name]
        _clear_sheet(ws)
        logger.info("Cleared existing sheet %r", sheet_name)
    else:
        try:
            ws = wb.create_sheet(sheet_name)
        except ValueError as e:
            raise WorkbookError(f"Invalid output sheet name \"{sheet_name}\": {e}")
        logger.info("Created sheet %r", sheet_name)

    for r, row in enumerate(rows, start=1):
        for c, value in enumerate(row, start=1):
            ws.cell(row=r, column=c, value=None if value == "" else value)

    apply_column_formats(ws, formats)
    auto_column_widths(ws)
    wb.save(path)
    logger.info("Wrote %d rows and %d formatted columns to %r in %s", len(rows), len(formats), sheet_name, path)
