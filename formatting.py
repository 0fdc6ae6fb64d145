"""Per-question colour scale thresholds for the rearranged sheet."""
import logging
import math
import re
from typing import Any, List, Optional, Sequence

from models import ColumnFormat

logger = logging.getLogger(__name__)

LOW_COLOR = "FF0000"    # red at 0
MID_COLOR = "FFC000"    # amber at max / 2
HIGH_COLOR = "00FF00"   # green at max
SENTINEL = "N"
SENTINEL_COLOR = "FF0000"

HEADER_ROWS = 2

NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def parse_max_mark(value: Any) -> Optional[float]:
    """Return *value* as a float, or None when it is not a usable number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not NUMBER_RE.fullmatch(text):
            return None
        number = float(text)
    if not math.isfinite(number):
        return None
    return number


def build_column_formats(rows: Sequence[Sequence[Any]], fixed_count: int,
                         question_count: int) -> List[ColumnFormat]:
    last_row = len(rows)
    max_marks = rows[1] if len(rows) > 1 else []
    formats: List[ColumnFormat] = []
    for i in range(question_count):
        col_idx = fixed_count + 1 + i
        raw = max_marks[col_idx - 1] if col_idx - 1 < len(max_marks) else None
        max_mark = parse_max_mark(raw)
        if max_mark is None or max_mark <= 0:
            logger.debug("Column %d: max mark %r is not positive, no formatting", col_idx, raw)
            continue
        formats.append(ColumnFormat(
            column=col_idx,
            first_row=HEADER_ROWS + 1,
            last_row=last_row,
            max_mark=max_mark,
            sentinel=SENTINEL,
        ))
    return formats
