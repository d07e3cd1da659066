"""
PromoterPro - Routes Backup
Export complet du dataset et restauration (écrase chaque collection présente).
"""

from typing import Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from routes.auth import get_refresher, get_repository, require_lead
from services.backup import backup_filename, export_snapshot_json, restore_snapshot
from services.refresh import SnapshotRefresher
from services.repository import BaseRepository

router = APIRouter(prefix="/backup", tags=["Backup"])


@router.get("")
async def download_backup(
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    content = await export_snapshot_json(repo)
    return Response(
        content=content.encode("utf-8"),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'},
    )


@router.post("/restore")
async def restore_backup(
    request: Request,
    repo: BaseRepository = Depends(get_repository),
    refresher: SnapshotRefresher = Depends(get_refresher),
    session: Dict = Depends(require_lead),
):
    """
    Corps = le fichier JSON de backup tel quel.
    Document invalide -> 400 avant toute écriture.
    """
    raw = await request.body()
    restored = await restore_snapshot(repo, raw)
    await refresher.refresh()
    return {"success": True, "restored": restored}
