"""Rearrange one workbook: read the source sheet, transform, write the result."""
import logging
from typing import Callable, List, Optional, Tuple

from errors import RearrangeError
from formatting import build_column_formats
from models import OUTPUT_SHEET_NAME, ColumnFormat, RearrangedTable, RearrangeResult
from rearranger import rearrange
from storage import read_sheet_values, write_rearranged

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


def _log_notify(message: str) -> None:
    logger.info("NOTIFY %s", message)


def _transform(path: str, source_sheet: Optional[str]) -> Tuple[str, RearrangedTable, List[ColumnFormat]]:
    title, values = read_sheet_values(path, source_sheet)
    table = rearrange(values)
    formats = build_column_formats(table.rows, table.layout.fixed_count, len(table.question_ids))
    return title, table, formats


def preview_workbook(path: str, source_sheet: Optional[str] = None) -> Tuple[str, RearrangedTable, List[ColumnFormat]]:
    return _transform(path, source_sheet)


def rearrange_workbook(path: str, source_sheet: Optional[str] = None,
                       output_sheet: str = OUTPUT_SHEET_NAME,
                       notify: Notifier = _log_notify) -> RearrangeResult:
    """Rearrange *source_sheet* of the workbook at *path* into *output_sheet*.

    Every failure is reported through *notify* and re-raised before the
    workbook is written, so a failed run leaves the file as it was.
    """
    try:
        title, table, formats = _transform(path, source_sheet)
        write_rearranged(path, output_sheet, table.rows, formats)
    except RearrangeError as e:
        logger.warning("Rearrange aborted for %s: %s", path, e)
        notify(str(e))
        raise

    message = (
        "Data rearrangement and conditional formatting complete!\n"
        f'Processed data from "{title}" to "{output_sheet}".'
    )
    notify(message)
    return RearrangeResult(
        message=message,
        source_sheet=title,
        output_sheet=output_sheet,
        fixed_count=table.layout.fixed_count,
        question_ids=table.question_ids,
        data_rows=table.data_row_count,
        formatted_columns=[f.column for f in formats],
    )
