"""
PromoterPro - Service Settings

Un seul enregistrement de settings, stocké comme liste à un élément:
    [{"logoUrl": "data:image/png;base64,..."}]

Settings disponibles:
- logoUrl: logo affiché sur le dashboard (data URL), "" = pas de logo
"""

import logging
from typing import Any, Dict, Optional

from services.repository import BaseRepository, Collection

logger = logging.getLogger("settings")


async def get_settings(repo: BaseRepository) -> Dict[str, Any]:
    """Le record de settings (vide si aucun)"""
    items = await repo.list(Collection.SETTINGS)
    return dict(items[0]) if items else {}


async def upsert_settings(repo: BaseRepository, data: Dict[str, Any]) -> Dict[str, Any]:
    """Merge data into the settings record and write it back"""
    settings = await get_settings(repo)
    settings.update(data)
    await repo.replace(Collection.SETTINGS, [settings])
    return settings


# ---- Logo helpers ----

async def get_logo(repo: BaseRepository) -> Optional[str]:
    settings = await get_settings(repo)
    return settings.get("logoUrl") or None


async def save_logo(repo: BaseRepository, url: str) -> Dict[str, Any]:
    settings = await upsert_settings(repo, {"logoUrl": url})
    logger.info(f"[SETTINGS] Logo {'updated' if url else 'cleared'}")
    return settings


async def clear_logo(repo: BaseRepository) -> Dict[str, Any]:
    return await save_logo(repo, "")
