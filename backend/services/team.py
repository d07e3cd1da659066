"""
PromoterPro - Promoters & Floors (gérés par le Team Lead)

Floors are referenced by name. Removing a floor leaves promoters' assignments
and past sales untouched. Renaming a promoter does not back-fill the
promoterName snapshot on existing sales/feedback.
"""

import logging
from typing import Any, Dict, List, Optional

from config import generate_id
from models import Floor, Promoter, PromoterUpdate
from services.repository import BaseRepository, Collection

logger = logging.getLogger("team")


# ==================== PROMOTERS ====================

async def list_promoters(repo: BaseRepository) -> List[Dict[str, Any]]:
    return await repo.list(Collection.PROMOTERS)


async def add_promoter(repo: BaseRepository, name: str) -> Dict[str, Any]:
    promoter = Promoter(id=generate_id(), name=name.strip(), assigned_floors=[]).to_record()
    await repo.add(Collection.PROMOTERS, promoter)
    logger.info(f"[TEAM] Promoter added: {promoter['name']} ({promoter['id']})")
    return promoter


async def update_promoter(
    repo: BaseRepository,
    promoter_id: str,
    data: PromoterUpdate
) -> Optional[Dict[str, Any]]:
    """Lead-side edit: name and/or floor assignment"""
    promoter = await repo.get(Collection.PROMOTERS, promoter_id)
    if not promoter:
        return None

    updated = dict(promoter)
    if data.name is not None and data.name.strip():
        updated["name"] = data.name.strip()
    if data.assigned_floors is not None:
        # keep order, drop duplicates
        updated["assignedFloors"] = list(dict.fromkeys(data.assigned_floors))

    await repo.update(Collection.PROMOTERS, updated)
    return updated


async def toggle_floor(repo: BaseRepository, promoter_id: str, floor_name: str) -> Optional[Dict[str, Any]]:
    """Assign the floor if missing, unassign it otherwise"""
    promoter = await repo.get(Collection.PROMOTERS, promoter_id)
    if not promoter:
        return None

    floors = list(promoter.get("assignedFloors") or [])
    if floor_name in floors:
        floors = [f for f in floors if f != floor_name]
    else:
        floors.append(floor_name)

    updated = {**promoter, "assignedFloors": floors}
    await repo.update(Collection.PROMOTERS, updated)
    return updated


async def remove_promoter(repo: BaseRepository, promoter_id: str) -> bool:
    removed = await repo.delete(Collection.PROMOTERS, promoter_id)
    if removed:
        logger.info(f"[TEAM] Promoter removed: {promoter_id}")
    return removed


# ==================== FLOORS ====================

async def list_floors(repo: BaseRepository) -> List[Dict[str, Any]]:
    return await repo.list(Collection.FLOORS)


async def add_floor(repo: BaseRepository, name: str) -> Dict[str, Any]:
    floor = Floor(id=generate_id(), name=name.strip()).to_record()
    await repo.add(Collection.FLOORS, floor)
    return floor


async def remove_floor(repo: BaseRepository, floor_id: str) -> bool:
    return await repo.delete(Collection.FLOORS, floor_id)
