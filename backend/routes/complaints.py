"""
PromoterPro - Routes Complaints
Customer Service logs, Team Lead resolves and archives.
"""

from typing import Dict

from fastapi import APIRouter, HTTPException, Depends

from models import ComplaintCreate, ComplaintResolve, ComplaintSource, UserRole
from routes.auth import get_repository, require_complaint_desk, require_lead
from services.complaints import list_complaints, log_complaint
from services.repository import BaseRepository
from services.workflow_state_machine import archive_complaint, archive_resolved, resolve_complaint

router = APIRouter(prefix="/complaints", tags=["Complaints"])

COMPLAINT_NOT_FOUND = "Plainte non trouvée"


@router.post("")
async def create_complaint(
    data: ComplaintCreate,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_complaint_desk),
):
    source = ComplaintSource.TEAM_LEAD if session["role"] == UserRole.LEAD else ComplaintSource.CUSTOMER_SERVICE
    return await log_complaint(repo, data, source)


@router.get("")
async def get_complaints(
    include_archived: bool = False,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_complaint_desk),
):
    return await list_complaints(repo, include_archived)


@router.post("/archive-resolved")
async def clear_resolved(
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    return {"archived": await archive_resolved(repo)}


@router.post("/{complaint_id}/resolve")
async def resolve(
    complaint_id: str,
    data: ComplaintResolve,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    complaint = await resolve_complaint(repo, complaint_id, data.resolution_notes)
    if not complaint:
        raise HTTPException(status_code=404, detail=COMPLAINT_NOT_FOUND)
    return complaint


@router.post("/{complaint_id}/archive")
async def archive(
    complaint_id: str,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    complaint = await archive_complaint(repo, complaint_id)
    if not complaint:
        raise HTTPException(status_code=404, detail=COMPLAINT_NOT_FOUND)
    return complaint
