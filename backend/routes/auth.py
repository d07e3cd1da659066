"""
PromoterPro - Routes Auth
Login / Logout for the shared-secret roles, plus the dependencies every
router uses to reach the store and check the caller's role.
"""

from typing import Dict

from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from models import UserLogin, UserRole, SessionResponse
from services.access import SessionStore, check_role_credentials
from services.refresh import SnapshotRefresher
from services.repository import BaseRepository

router = APIRouter(prefix="/auth", tags=["Auth"])
security = HTTPBearer(auto_error=False)


# ==================== HELPERS ====================

def get_repository(request: Request) -> BaseRepository:
    return request.app.state.repository


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_refresher(request: Request) -> SnapshotRefresher:
    return request.app.state.refresher


async def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    sessions: SessionStore = Depends(get_sessions),
) -> Dict:
    """Récupère la session depuis le bearer token."""
    if not credentials:
        raise HTTPException(status_code=401, detail="Non authentifié")

    session = sessions.resolve(credentials.credentials)
    if not session:
        raise HTTPException(status_code=401, detail="Session expirée")

    return session


def require_role(*roles: UserRole):
    """Dependency factory: the session must hold one of these roles."""
    async def checker(session: Dict = Depends(get_current_session)) -> Dict:
        if session["role"] not in roles:
            raise HTTPException(status_code=403, detail="Accès refusé pour ce rôle")
        return session
    return checker


require_lead = require_role(UserRole.LEAD)
require_promoter = require_role(UserRole.PROMOTER)
require_complaint_desk = require_role(UserRole.LEAD, UserRole.CUSTOMER_SERVICE)


# ==================== LOGIN / LOGOUT ====================

@router.post("/login", response_model=SessionResponse)
async def login(data: UserLogin, sessions: SessionStore = Depends(get_sessions)):
    """Connexion Team Lead / Customer Service."""
    role = check_role_credentials(data.username, data.password)
    token = sessions.open(role)
    return SessionResponse(token=token, role=role)


@router.post("/logout")
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    sessions: SessionStore = Depends(get_sessions),
):
    """Déconnexion (idempotent)."""
    if credentials:
        sessions.close(credentials.credentials)
    return {"success": True}


@router.get("/me")
async def me(session: Dict = Depends(get_current_session)):
    return {"role": session["role"], "promoter_id": session["promoter_id"]}
