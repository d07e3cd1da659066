"""
PromoterPro - Routes Promoters
Gestion de l'équipe (Team Lead) et accès promoteur par mot de passe.
"""

from typing import Dict

from fastapi import APIRouter, HTTPException, Depends

from models import (
    PromoterCreate,
    PromoterUpdate,
    FloorToggle,
    PasswordCreate,
    PasswordLogin,
    PasswordReset,
    SessionResponse,
    UserRole,
)
from routes.auth import get_repository, get_sessions, require_lead, require_promoter
from services.access import (
    SessionStore,
    create_promoter_password,
    promoter_auth_mode,
    reset_promoter_password,
    verify_promoter_password,
)
from services.repository import BaseRepository, Collection
from services.sales import promoter_history
from services.team import add_promoter, list_promoters, remove_promoter, toggle_floor, update_promoter

router = APIRouter(prefix="/promoters", tags=["Promoters"])

PROMOTER_NOT_FOUND = "Promoteur non trouvé"


def public_view(promoter: Dict) -> Dict:
    """Promoter without its password digest"""
    return {k: v for k, v in promoter.items() if k != "password"}


# ==================== CRUD ====================

@router.get("")
async def get_promoters(repo: BaseRepository = Depends(get_repository)):
    return [public_view(p) for p in await list_promoters(repo)]


@router.post("")
async def create_promoter(
    data: PromoterCreate,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    return public_view(await add_promoter(repo, data.name))


@router.put("/{promoter_id}")
async def edit_promoter(
    promoter_id: str,
    data: PromoterUpdate,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    promoter = await update_promoter(repo, promoter_id, data)
    if not promoter:
        raise HTTPException(status_code=404, detail=PROMOTER_NOT_FOUND)
    return public_view(promoter)


@router.delete("/{promoter_id}")
async def delete_promoter(
    promoter_id: str,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    if not await remove_promoter(repo, promoter_id):
        raise HTTPException(status_code=404, detail=PROMOTER_NOT_FOUND)
    return {"success": True}


@router.post("/{promoter_id}/floors/toggle")
async def toggle_promoter_floor(
    promoter_id: str,
    data: FloorToggle,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    promoter = await toggle_floor(repo, promoter_id, data.floor_name)
    if not promoter:
        raise HTTPException(status_code=404, detail=PROMOTER_NOT_FOUND)
    return public_view(promoter)


# ==================== PASSWORD ACCESS ====================

async def _get_or_404(repo: BaseRepository, promoter_id: str) -> Dict:
    promoter = await repo.get(Collection.PROMOTERS, promoter_id)
    if not promoter:
        raise HTTPException(status_code=404, detail=PROMOTER_NOT_FOUND)
    return promoter


@router.get("/{promoter_id}/auth-mode")
async def get_auth_mode(promoter_id: str, repo: BaseRepository = Depends(get_repository)):
    promoter = await _get_or_404(repo, promoter_id)
    return {"mode": promoter_auth_mode(promoter)}


@router.post("/{promoter_id}/password", response_model=SessionResponse)
async def create_password(
    promoter_id: str,
    data: PasswordCreate,
    repo: BaseRepository = Depends(get_repository),
    sessions: SessionStore = Depends(get_sessions),
):
    """Premier accès: crée le mot de passe et ouvre la session"""
    promoter = await create_promoter_password(repo, promoter_id, data.password, data.confirm_password)
    if not promoter:
        raise HTTPException(status_code=404, detail=PROMOTER_NOT_FOUND)
    token = sessions.open(UserRole.PROMOTER, promoter_id)
    return SessionResponse(token=token, role=UserRole.PROMOTER, promoter_id=promoter_id)


@router.post("/{promoter_id}/login", response_model=SessionResponse)
async def login_promoter(
    promoter_id: str,
    data: PasswordLogin,
    repo: BaseRepository = Depends(get_repository),
    sessions: SessionStore = Depends(get_sessions),
):
    promoter = await verify_promoter_password(repo, promoter_id, data.password)
    if not promoter:
        raise HTTPException(status_code=404, detail=PROMOTER_NOT_FOUND)
    token = sessions.open(UserRole.PROMOTER, promoter_id)
    return SessionResponse(token=token, role=UserRole.PROMOTER, promoter_id=promoter_id)


@router.post("/{promoter_id}/password/reset")
async def reset_password(
    promoter_id: str,
    data: PasswordReset,
    repo: BaseRepository = Depends(get_repository),
    sessions: SessionStore = Depends(get_sessions),
):
    promoter = await reset_promoter_password(repo, promoter_id, data.admin_secret)
    if not promoter:
        raise HTTPException(status_code=404, detail=PROMOTER_NOT_FOUND)
    sessions.close_promoter(promoter_id)
    return {"success": True, "mode": promoter_auth_mode(promoter)}


@router.get("/{promoter_id}/history")
async def get_history(
    promoter_id: str,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_promoter),
):
    """Ventes et feedbacks du promoteur connecté uniquement"""
    if session["promoter_id"] != promoter_id:
        raise HTTPException(status_code=403, detail="Accès refusé")
    await _get_or_404(repo, promoter_id)
    return await promoter_history(repo, promoter_id)
