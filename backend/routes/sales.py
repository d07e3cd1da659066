"""
PromoterPro - Routes Sales
Saisie par le promoteur, vérification au guichet par code unique.
"""

from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from models import SaleStatus, SaleSubmit, SaleStatusUpdate
from routes.auth import get_repository, require_promoter
from services.repository import BaseRepository, Collection
from services.sales import find_pending_by_code, list_sales, submit_sale
from services.workflow_state_machine import transition_sale

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.post("")
async def create_sale(
    data: SaleSubmit,
    repo: BaseRepository = Depends(get_repository),
    session: Dict = Depends(require_promoter),
):
    promoter = await repo.get(Collection.PROMOTERS, session["promoter_id"])
    if not promoter:
        raise HTTPException(status_code=404, detail="Promoteur non trouvé")
    return await submit_sale(repo, promoter, data)


@router.get("")
async def get_sales(
    status: Optional[SaleStatus] = None,
    repo: BaseRepository = Depends(get_repository),
):
    return await list_sales(repo, status)


@router.get("/lookup")
async def lookup_sale(
    code: str = Query(..., min_length=1),
    repo: BaseRepository = Depends(get_repository),
):
    """Ventes Pending correspondant au code (plusieurs en cas de collision)"""
    return await find_pending_by_code(repo, code)


@router.post("/{sale_id}/status")
async def update_sale_status(
    sale_id: str,
    data: SaleStatusUpdate,
    repo: BaseRepository = Depends(get_repository),
):
    sale = await transition_sale(repo, sale_id, data.status)
    if not sale:
        raise HTTPException(status_code=404, detail="Vente non trouvée")
    return sale
