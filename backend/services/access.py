"""
PromoterPro - Access gates

- LEAD and CUSTOMER_SERVICE: one shared username/password each (config)
- PROMOTER: each promoter sets their own password on first access; a reset
  needs the shared admin secret and puts the promoter back in create mode
- VERIFIER: open

Sessions live in process memory only; they are not part of the dataset.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import config
from config import generate_token, hash_password
from models import PromoterAuthMode, UserRole
from services.errors import AuthError
from services.repository import BaseRepository, Collection

logger = logging.getLogger("access")

MIN_PASSWORD_LENGTH = 4


# ==================== ROLE GATE ====================

def check_role_credentials(username: str, password: str) -> UserRole:
    """Map a shared-secret login to its role"""
    user = (username or "").strip()
    pwd = (password or "").strip()

    if user == config.LEAD_USERNAME and pwd == config.LEAD_PASSWORD:
        return UserRole.LEAD
    if user == config.CS_USERNAME and pwd == config.CS_PASSWORD:
        return UserRole.CUSTOMER_SERVICE

    raise AuthError("Invalid credentials. Please contact your administrator.")


class SessionStore:
    """Bearer token -> {role, promoter_id, expires_at}"""

    def __init__(self, ttl_hours: int = None):
        self.ttl = timedelta(hours=ttl_hours or config.SESSION_TTL_HOURS)
        self._sessions: Dict[str, Dict] = {}

    def open(self, role: UserRole, promoter_id: str = "") -> str:
        self.sweep()
        token = generate_token()
        self._sessions[token] = {
            "role": role,
            "promoter_id": promoter_id,
            "expires_at": datetime.now(timezone.utc) + self.ttl,
        }
        logger.info(f"[ACCESS] Session opened for {role.value} {promoter_id}".rstrip())
        return token

    def resolve(self, token: str) -> Optional[Dict]:
        session = self._sessions.get(token)
        if not session:
            return None
        if session["expires_at"] <= datetime.now(timezone.utc):
            self._sessions.pop(token, None)
            return None
        return session

    def close(self, token: str) -> None:
        self._sessions.pop(token, None)

    def sweep(self) -> int:
        """Drop expired sessions, returns how many were removed"""
        now = datetime.now(timezone.utc)
        expired = [t for t, s in self._sessions.items() if s["expires_at"] <= now]
        for token in expired:
            self._sessions.pop(token, None)
        if expired:
            logger.info(f"[ACCESS] {len(expired)} expired session(s) removed")
        return len(expired)

    def close_promoter(self, promoter_id: str) -> None:
        """Drop every session of a promoter (after a password reset)"""
        for token in [t for t, s in self._sessions.items() if s["promoter_id"] == promoter_id]:
            self._sessions.pop(token, None)


# ==================== PROMOTER PASSWORDS ====================

def has_password(promoter: Dict) -> bool:
    return bool(promoter.get("password"))


def promoter_auth_mode(promoter: Dict) -> PromoterAuthMode:
    return PromoterAuthMode.LOGIN if has_password(promoter) else PromoterAuthMode.CREATE_PASSWORD


async def create_promoter_password(
    repo: BaseRepository,
    promoter_id: str,
    password: str,
    confirm_password: str
) -> Optional[Dict]:
    promoter = await repo.get(Collection.PROMOTERS, promoter_id)
    if not promoter:
        return None

    if has_password(promoter):
        raise AuthError("Password already set. Reset it first.")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if password != confirm_password:
        raise AuthError("Passwords do not match")

    updated = {**promoter, "password": hash_password(password)}
    await repo.update(Collection.PROMOTERS, updated)
    logger.info(f"[ACCESS] Password created for promoter {promoter_id}")
    return updated


async def verify_promoter_password(repo: BaseRepository, promoter_id: str, password: str) -> Optional[Dict]:
    promoter = await repo.get(Collection.PROMOTERS, promoter_id)
    if not promoter:
        return None

    if not has_password(promoter):
        raise AuthError("No password set. Create one first.")
    if promoter["password"] != hash_password(password or ""):
        raise AuthError("Incorrect Password")

    return promoter


async def reset_promoter_password(repo: BaseRepository, promoter_id: str, admin_secret: str) -> Optional[Dict]:
    """Clears the password; the promoter goes back to CREATE_PASSWORD"""
    promoter = await repo.get(Collection.PROMOTERS, promoter_id)
    if not promoter:
        return None

    if admin_secret != config.PROMOTER_RESET_SECRET:
        raise AuthError("Invalid Admin Password. Contact Team Lead.")

    updated = {**promoter, "password": ""}
    await repo.update(Collection.PROMOTERS, updated)
    logger.warning(f"[ACCESS] Password reset for promoter {promoter_id}")
    return updated
