"""
Routes pour les statistiques promoteurs et le dashboard Team Lead
"""

from typing import Dict

from fastapi import APIRouter, Depends

from routes.auth import get_refresher, get_repository, require_lead
from services.insights import generate_performance_insight
from services.kpi import aggregate_kpis, summarize_complaints
from services.refresh import SnapshotRefresher
from services.repository import BaseRepository, Collection

router = APIRouter(tags=["Statistiques"])


@router.get("/stats/kpis")
async def get_kpis(
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    """
    Une ligne KPI par promoteur, dans l'ordre de la liste des promoteurs.
    Seules les ventes Verified comptent.
    """
    promoters = await repo.list(Collection.PROMOTERS)
    sales = await repo.list(Collection.SALES)
    return [s.model_dump(by_alias=True) for s in aggregate_kpis(promoters, sales)]


@router.get("/stats/complaints")
async def get_complaint_summary(
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    complaints = await repo.list(Collection.COMPLAINTS)
    return summarize_complaints(complaints).model_dump(by_alias=True)


@router.get("/dashboard")
async def get_dashboard(
    refresher: SnapshotRefresher = Depends(get_refresher),
    session: Dict = Depends(require_lead),
):
    """Dernier snapshot publié par le refresh planifié"""
    snapshot = await refresher.current()
    return snapshot.to_dict()


@router.post("/stats/insight")
async def get_insight(
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_lead),
):
    promoters = await repo.list(Collection.PROMOTERS)
    sales = await repo.list(Collection.SALES)
    stats = aggregate_kpis(promoters, sales)
    public_promoters = [{k: v for k, v in p.items() if k != "password"} for p in promoters]
    text = await generate_performance_insight(stats, public_promoters, sales)
    return {"insight": text}
