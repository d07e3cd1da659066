"""
PromoterPro - Routes Exports CSV
Téléchargement des rapports sur une plage de jours (bornes incluses).
"""

from datetime import date
from typing import Dict

from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import Response

from routes.auth import get_repository, require_lead
from services.csv_export import CsvExport, export_complaints_csv, export_feedback_csv, export_sales_csv
from services.repository import BaseRepository, Collection

router = APIRouter(prefix="/exports", tags=["Exports"])


def _check_range(start: date, end: date):
    if start > end:
        raise HTTPException(status_code=422, detail="start doit précéder end")


def csv_response(export: CsvExport) -> Response:
    if export.is_empty:
        raise HTTPException(status_code=404, detail="No records found for the selected date range.")
    return Response(
        content=export.content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/sales")
async def export_sales(
    start: date = Query(...),
    end: date = Query(...),
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    _check_range(start, end)
    sales = await repo.list(Collection.SALES)
    return csv_response(export_sales_csv(sales, start, end))


@router.get("/complaints")
async def export_complaints(
    start: date = Query(...),
    end: date = Query(...),
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    """Inclut les plaintes archivées"""
    _check_range(start, end)
    complaints = await repo.list(Collection.COMPLAINTS)
    return csv_response(export_complaints_csv(complaints, start, end))


@router.get("/feedback")
async def export_feedback(
    start: date = Query(...),
    end: date = Query(...),
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    _check_range(start, end)
    feedbacks = await repo.list(Collection.FEEDBACKS)
    return csv_response(export_feedback_csv(feedbacks, start, end))
