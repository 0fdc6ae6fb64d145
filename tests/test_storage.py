import openpyxl
import pytest
from errors import SheetNotFoundError, WorkbookError
from formatting import build_column_formats
from storage import list_sheets, read_sheet_values, write_rearranged

ROWS = [["ID", "Q1", "Q2"], ["", 10, 5], ["s1", 5, ""], ["s2", "N", 3]]


def _rules(ws):
    found = []
    for cf in ws.conditional_formatting:
        for rule in cf.rules:
            found.append((str(cf.sqref), rule))
    return found


def test_list_sheets(make_workbook):
    path = make_workbook({"Marks": [["a"]], "Other": [["b"]]})
    sheets, active = list_sheets(path)
    assert sheets == ["Marks", "Other"]
    assert active == "Marks"


def test_read_active_sheet_normalizes_empty_cells(make_workbook):
    path = make_workbook({"Marks": [["ID", "QuestionNum"], ["s1", None]]})
    title, values = read_sheet_values(path)
    assert title == "Marks"
    assert values == [["ID", "QuestionNum"], ["s1", ""]]


def test_read_named_sheet(make_workbook):
    path = make_workbook({"Marks": [["a"]], "Other": [["b"]]})
    title, values = read_sheet_values(path, "Other")
    assert title == "Other"
    assert values == [["b"]]


def test_read_unknown_sheet(make_workbook):
    path = make_workbook({"Marks": [["a"]]})
    with pytest.raises(SheetNotFoundError):
        read_sheet_values(path, "Nope")


def test_write_creates_sheet_with_rows_and_rules(make_workbook):
    path = make_workbook({"Marks": [["x"]]})
    formats = build_column_formats(ROWS, fixed_count=1, question_count=2)
    write_rearranged(path, "Processed Data", ROWS, formats)

    wb = openpyxl.load_workbook(path)
    assert wb.sheetnames == ["Marks", "Processed Data"]
    ws = wb["Processed Data"]
    assert [list(r) for r in ws.iter_rows(values_only=True)] == [
        ["ID", "Q1", "Q2"],
        [None, 10, 5],
        ["s1", 5, None],
        ["s2", "N", 3],
    ]

    rules = _rules(ws)
    assert [(rng, rule.type) for rng, rule in rules] == [
        ("B3:B4", "cellIs"),
        ("B3:B4", "colorScale"),
        ("C3:C4", "cellIs"),
        ("C3:C4", "colorScale"),
    ]
    sentinel = rules[0][1]
    assert list(sentinel.formula) == ['"N"']
    assert sentinel.priority < rules[1][1].priority
    stops = [float(c.val) for c in rules[3][1].colorScale.cfvo]
    assert stops == [0.0, 2.5, 5.0]


def test_write_replaces_previous_contents_and_rules(make_workbook):
    old = [["old"] * 5 for _ in range(10)]
    path = make_workbook({"Marks": [["x"]], "Processed Data": old})
    wide = [["ID", "Q1", "Q2", "Q3"], ["", 1, 2, 3], ["s1", 1, 1, 1], ["s2", 0, 0, 0]]
    write_rearranged(path, "Processed Data", wide, build_column_formats(wide, 1, 3))
    write_rearranged(path, "Processed Data", ROWS, build_column_formats(ROWS, 1, 2))

    ws = openpyxl.load_workbook(path)["Processed Data"]
    values = [list(r) for r in ws.iter_rows(values_only=True)]
    assert values[0] == ["ID", "Q1", "Q2"]
    assert len(values) == 4
    assert "old" not in {v for row in values for v in row}
    assert {rng for rng, _ in _rules(ws)} == {"B3:B4", "C3:C4"}


def test_read_file_that_is_not_a_workbook(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_text("ID,QuestionNum,Mark,MaxMark\n")
    with pytest.raises(WorkbookError):
        read_sheet_values(str(path))
    with pytest.raises(WorkbookError):
        list_sheets(str(path))


def test_write_invalid_sheet_name_leaves_file_unchanged(make_workbook):
    path = make_workbook({"Marks": [["x"]]})
    with open(path, "rb") as f:
        before = f.read()
    with pytest.raises(WorkbookError):
        write_rearranged(path, "Bad/Name", ROWS, [])
    with open(path, "rb") as f:
        assert f.read() == before
