"""
PromoterPro - Routes Floors
"""

from typing import Dict

from fastapi import APIRouter, HTTPException, Depends

from models import FloorCreate
from routes.auth import get_repository, require_lead
from services.repository import BaseRepository
from services.team import add_floor, list_floors, remove_floor

router = APIRouter(prefix="/floors", tags=["Floors"])


@router.get("")
async def get_floors(repo: BaseRepository = Depends(get_repository)):
    return await list_floors(repo)


@router.post("")
async def create_floor(
    data: FloorCreate,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    return await add_floor(repo, data.name)


@router.delete("/{floor_id}")
async def delete_floor(
    floor_id: str,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    """Les promoteurs gardent le nom de l'étage dans assignedFloors"""
    if not await remove_floor(repo, floor_id):
        raise HTTPException(status_code=404, detail="Étage non trouvé")
    return {"success": True}
