import openpyxl
import pytest
from fastapi.testclient import TestClient
from main import app


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def make_workbook(tmp_path):
    """Write ``{sheet_name: rows}`` to an .xlsx file; the first sheet is active."""
    def _make(sheets, name="marks.xlsx"):
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title)
            for row in rows:
                ws.append(row)
        wb.active = 0
        path = tmp_path / name
        wb.save(path)
        return str(path)
    return _make
