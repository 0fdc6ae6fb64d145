from fastapi import APIRouter, HTTPException
from models import (
    ColumnFormatOut,
    PreviewRequest,
    PreviewResult,
    RearrangeRequest,
    RearrangeResult,
)
from errors import RearrangeError
from service import preview_workbook, rearrange_workbook
import os
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_workbook(path: str, route: str):
    if not os.path.isfile(path):
        logger.warning("%s — workbook does not exist: %s", route, path)
        raise HTTPException(status_code=400, detail=f"workbook does not exist: {path}")


@router.post("/rearrange", response_model=RearrangeResult)
def post_rearrange(req: RearrangeRequest):
    logger.info("POST /rearrange — workbook: %s, source_sheet: %s, output_sheet: %s", req.workbook, req.source_sheet, req.output_sheet)
    _require_workbook(req.workbook, "POST /rearrange")

    try:
        result = rearrange_workbook(req.workbook, req.source_sheet, req.output_sheet)
    except RearrangeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("POST /rearrange — %d data rows, %d questions written to %r", result.data_rows, len(result.question_ids), result.output_sheet)
    return result


@router.post("/rearrange/preview", response_model=PreviewResult)
def post_rearrange_preview(req: PreviewRequest):
    logger.info("POST /rearrange/preview — workbook: %s, source_sheet: %s", req.workbook, req.source_sheet)
    _require_workbook(req.workbook, "POST /rearrange/preview")

    try:
        title, table, formats = preview_workbook(req.workbook, req.source_sheet)
    except RearrangeError as e:
        logger.warning("POST /rearrange/preview — %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    return PreviewResult(
        source_sheet=title,
        fixed_count=table.layout.fixed_count,
        question_ids=table.question_ids,
        rows=table.rows,
        formats=[
            ColumnFormatOut(
                column=f.column,
                first_row=f.first_row,
                last_row=f.last_row,
                gradient=list(f.gradient),
                sentinel=f.sentinel,
            )
            for f in formats
        ],
    )
