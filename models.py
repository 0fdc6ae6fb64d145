from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

OUTPUT_SHEET_NAME = "Processed Data"


# ── Core table types ─────────────────────────────────────────────────────────

@dataclass
class ColumnLayout:
    fixed_count: int
    triplet_count: int

    def triplet_columns(self, t: int) -> tuple:
        """Return the (question, mark, max mark) column indices of triplet *t*."""
        start = self.fixed_count + t * 3
        return start, start + 1, start + 2


def question_key(question_id: Any) -> str:
    """Text form a question id is matched on, so 1, 1.0 and "1" are one question."""
    if isinstance(question_id, float) and question_id.is_integer():
        return str(int(question_id))
    return str(question_id)


@dataclass
class QuestionCatalog:
    """Question identifiers in order of first appearance, with their max marks.

    Lookups go through :func:`question_key`; the first-seen cell value is kept
    as the column label.
    """
    max_marks: Dict[str, Any] = field(default_factory=dict)
    labels: Dict[str, Any] = field(default_factory=dict)

    def add_if_absent(self, question_id: Any, max_mark: Any) -> bool:
        key = question_key(question_id)
        if key in self.max_marks:
            return False
        self.labels[key] = question_id
        self.max_marks[key] = max_mark
        return True

    def max_mark(self, question_id: Any, default: Any = "") -> Any:
        return self.max_marks.get(question_key(question_id), default)

    @property
    def question_ids(self) -> List[Any]:
        return list(self.labels.values())

    def __len__(self) -> int:
        return len(self.max_marks)

    def __contains__(self, question_id: Any) -> bool:
        return question_key(question_id) in self.max_marks


@dataclass
class RearrangedTable:
    rows: List[List[Any]]
    layout: ColumnLayout
    question_ids: List[Any]

    @property
    def data_row_count(self) -> int:
        return len(self.rows) - 2


@dataclass
class ColumnFormat:
    column: int     # 1-based sheet column
    first_row: int  # 1-based, first data row
    last_row: int
    max_mark: float
    sentinel: str = "N"

    @property
    def gradient(self) -> tuple:
        return 0, self.max_mark / 2, self.max_mark


# ── API models ───────────────────────────────────────────────────────────────

class RearrangeRequest(BaseModel):
    workbook: str
    source_sheet: Optional[str] = None
    output_sheet: str = OUTPUT_SHEET_NAME


class PreviewRequest(BaseModel):
    workbook: str
    source_sheet: Optional[str] = None


class ColumnFormatOut(BaseModel):
    column: int
    first_row: int
    last_row: int
    gradient: List[float]
    sentinel: str


class RearrangeResult(BaseModel):
    status: str = "ok"
    message: str
    source_sheet: str
    output_sheet: str
    fixed_count: int
    question_ids: List[Any]
    data_rows: int
    formatted_columns: List[int] = []


class PreviewResult(BaseModel):
    source_sheet: str
    fixed_count: int
    question_ids: List[Any]
    rows: List[List[Any]]
    formats: List[ColumnFormatOut] = []


class SheetList(BaseModel):
    workbook: str
    sheets: List[str]
    active: Optional[str] = None
