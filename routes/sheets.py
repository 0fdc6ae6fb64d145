from fastapi import APIRouter, HTTPException
from models import SheetList
from errors import RearrangeError
from storage import list_sheets
import os

router = APIRouter()


@router.get("/sheets", response_model=SheetList)
def get_sheets(workbook: str):
    if not os.path.isfile(workbook):
        raise HTTPException(status_code=400, detail=f"workbook does not exist: {workbook}")
    try:
        sheets, active = list_sheets(workbook)
    except RearrangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SheetList(workbook=workbook, sheets=sheets, active=active)
