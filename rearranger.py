"""Reshape QuestionNum/Mark/MaxMark triplet rows into one column per question."""
import logging
from typing import Any, Dict, Iterable, List, Sequence

from errors import EmptyResultError, InsufficientDataError, LayoutError
from models import ColumnLayout, QuestionCatalog, RearrangedTable, question_key

logger = logging.getLogger(__name__)

MARKER_HEADER = "questionnum"
SKIP_KEYWORD = "max marks"


def _cell(row: Sequence[Any], idx: int) -> Any:
    if idx < len(row):
        value = row[idx]
        return "" if value is None else value
    return ""


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def detect_layout(header: Sequence[Any]) -> ColumnLayout:
    fixed_count = -1
    for i, name in enumerate(header):
        if name is not None and str(name).strip().lower() == MARKER_HEADER:
            fixed_count = i
            break
    if fixed_count == -1:
        raise LayoutError('The header row does not contain a "QuestionNum" column.')

    remaining = len(header) - fixed_count
    if remaining <= 0 or remaining % 3 != 0:
        raise LayoutError("The number of columns after fixed columns is not a multiple of 3.")

    layout = ColumnLayout(fixed_count=fixed_count, triplet_count=remaining // 3)
    logger.debug("Detected layout: %d fixed columns, %d triplets", layout.fixed_count, layout.triplet_count)
    return layout


def is_skipped_row(row: Sequence[Any]) -> bool:
    """Summary rows ("Max marks ...") and rows with an empty first cell are not candidates."""
    first = str(_cell(row, 0)).strip().lower()
    return first == "" or SKIP_KEYWORD in first


def data_rows(values: Sequence[Sequence[Any]]) -> List[Sequence[Any]]:
    return [row for row in values[1:] if not is_skipped_row(row)]


def iter_triplets(row: Sequence[Any], layout: ColumnLayout) -> Iterable[tuple]:
    """Yield (question_id, mark, max_mark) for each triplet with a non-blank question id."""
    for t in range(layout.triplet_count):
        q_col, mark_col, max_col = layout.triplet_columns(t)
        question_id = _cell(row, q_col)
        if _is_blank(question_id):
            continue
        yield question_id, _cell(row, mark_col), _cell(row, max_col)


def build_catalog(rows: Iterable[Sequence[Any]], layout: ColumnLayout) -> QuestionCatalog:
    catalog = QuestionCatalog()
    for row in rows:
        for question_id, _mark, max_mark in iter_triplets(row, layout):
            if catalog.add_if_absent(question_id, max_mark):
                continue
            recorded = catalog.max_mark(question_id)
            if max_mark != recorded and not _is_blank(max_mark):
                # first occurrence is authoritative
                logger.warning("Question %r: max mark %r ignored, keeping %r", question_id, max_mark, recorded)
    return catalog


def transpose_row(row: Sequence[Any], layout: ColumnLayout, question_ids: Sequence[Any]) -> List[Any]:
    marks: Dict[str, Any] = {}
    for question_id, mark, _max_mark in iter_triplets(row, layout):
        marks[question_key(question_id)] = mark

    fixed = [_cell(row, i) for i in range(layout.fixed_count)]
    return fixed + [marks.get(question_key(q), "") for q in question_ids]


def assemble_table(fixed_headers: Sequence[Any], catalog: QuestionCatalog,
                   transposed: List[List[Any]]) -> List[List[Any]]:
    if not transposed:
        raise EmptyResultError()

    question_ids = catalog.question_ids
    header_1 = list(fixed_headers) + question_ids
    header_2 = [""] * len(fixed_headers) + [catalog.max_mark(q) for q in question_ids]
    return [header_1, header_2] + transposed


def rearrange(values: Sequence[Sequence[Any]]) -> RearrangedTable:
    """Run layout detection, catalog building, transposition and assembly.

    Raises a :class:`errors.RearrangeError` subclass before producing any
    output when the table cannot be rearranged.
    """
    if len(values) < 2:
        raise InsufficientDataError()

    header = values[0]
    layout = detect_layout(header)

    rows = data_rows(values)
    catalog = build_catalog(rows, layout)
    question_ids = catalog.question_ids
    transposed = [transpose_row(row, layout, question_ids) for row in rows]

    fixed_headers = [_cell(header, i) for i in range(layout.fixed_count)]
    table = assemble_table(fixed_headers, catalog, transposed)
    logger.info("Rearranged %d data rows into %d question columns (%d skipped)",
                len(transposed), len(question_ids), len(values) - 1 - len(rows))
    return RearrangedTable(rows=table, layout=layout, question_ids=question_ids)
