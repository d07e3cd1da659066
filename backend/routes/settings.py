"""
PromoterPro - Routes Settings

Endpoints pour gerer les parametres:
- Logo du dashboard (data URL)
"""

from typing import Dict

from fastapi import APIRouter, Depends, HTTPException

from models.common import CamelModel
from routes.auth import get_repository, require_lead
from services.repository import BaseRepository
from services.settings import clear_logo, get_logo, save_logo

router = APIRouter(prefix="/settings", tags=["Settings"])


# ---- Models ----

class LogoUpdate(CamelModel):
    logo_url: str


# ---- Endpoints ----

@router.get("/logo")
async def read_logo(repo: BaseRepository = Depends(get_repository)):
    return {"logoUrl": await get_logo(repo)}


@router.put("/logo")
async def update_logo(
    data: LogoUpdate,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    if not data.logo_url.strip():
        raise HTTPException(status_code=422, detail="logoUrl vide, utiliser DELETE")
    settings = await save_logo(repo, data.logo_url)
    return {"logoUrl": settings["logoUrl"]}


@router.delete("/logo")
async def delete_logo(
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    await clear_logo(repo)
    return {"logoUrl": None}
