"""
PromoterPro - Routes Feedbacks
"""

from typing import Dict

from fastapi import APIRouter, HTTPException, Depends

from models import FeedbackSubmit
from routes.auth import get_repository, require_lead, require_promoter
from services.feedback import list_feedbacks, submit_feedback
from services.repository import BaseRepository, Collection

router = APIRouter(prefix="/feedbacks", tags=["Feedbacks"])


@router.post("")
async def create_feedback(
    data: FeedbackSubmit,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_promoter),
):
    promoter = await repo.get(Collection.PROMOTERS, session["promoter_id"])
    if not promoter:
        raise HTTPException(status_code=404, detail="Promoteur non trouvé")
    return await submit_feedback(repo, promoter, data)


@router.get("")
async def get_feedbacks(
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    return await list_feedbacks(repo)
