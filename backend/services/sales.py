"""
PromoterPro - Service Sales

Submission côté promoteur, recherche par code unique côté verifier.
Le changement de status passe UNIQUEMENT par workflow_state_machine.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from config import generate_id, now_ms
from models import CustomerData, SaleRecord, SaleStatus, SaleSubmit
from services.errors import SubmissionError
from services.repository import BaseRepository, Collection

logger = logging.getLogger("sales")

DEFAULT_SALE_LOCATION = "General"
REQUIRED_CUSTOMER_FIELDS = ["name", "mobile", "email", "location"]


def generate_unique_code(name: str, mobile: str) -> str:
    """
    {4 premières lettres du nom, majuscules}-{4 derniers chiffres du mobile | 0000}

    Not guaranteed unique: two customers can share a code.
    """
    name_part = re.sub(r"[^a-zA-Z]", "", name or "")[:4].upper()
    mobile_part = re.sub(r"[^0-9]", "", mobile or "")[-4:]
    return f"{name_part}-{mobile_part or '0000'}"


def validate_customer(customer: CustomerData) -> None:
    missing = [f for f in REQUIRED_CUSTOMER_FIELDS if not str(getattr(customer, f) or "").strip()]
    if missing:
        raise SubmissionError(f"Missing customer fields: {', '.join(missing)}")


def newest_first(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(records, key=lambda r: r.get("timestamp") or 0, reverse=True)


async def submit_sale(repo: BaseRepository, promoter: Dict[str, Any], data: SaleSubmit) -> Dict[str, Any]:
    """
    Crée une vente PENDING pour ce promoteur.

    Raises:
        SubmissionError si un champ client manque ou si aucun ticket n'est sélectionné
    """
    validate_customer(data.customer)

    items = {ticket.value: qty for ticket, qty in data.items.items()}
    if any(qty < 0 for qty in items.values()):
        raise SubmissionError("Ticket quantities cannot be negative")
    if not any(qty > 0 for qty in items.values()):
        raise SubmissionError("Please select at least one ticket type.")

    assigned = promoter.get("assignedFloors") or []
    sale_location = data.sale_location or (assigned[0] if assigned else DEFAULT_SALE_LOCATION)

    sale = SaleRecord(
        id=generate_id(),
        promoter_id=promoter["id"],
        promoter_name=promoter.get("name", ""),
        unique_code=generate_unique_code(data.customer.name, data.customer.mobile),
        customer=data.customer,
        items=items,
        total_amount=0,
        status=SaleStatus.PENDING,
        timestamp=now_ms(),
        sale_location=sale_location,
    ).to_record()

    await repo.add(Collection.SALES, sale)
    logger.info(f"[SALES] Sale {sale['id']} submitted by {promoter['id']} code={sale['uniqueCode']}")
    return sale


async def list_sales(repo: BaseRepository, status: Optional[SaleStatus] = None) -> List[Dict[str, Any]]:
    sales = await repo.list(Collection.SALES)
    if status is not None:
        sales = [s for s in sales if s.get("status") == SaleStatus(status).value]
    return sales


async def find_pending_by_code(repo: BaseRepository, code: str) -> List[Dict[str, Any]]:
    """Pending sales matching a unique code (case-insensitive); collisions return several"""
    wanted = (code or "").strip().upper()
    if not wanted:
        return []

    sales = await repo.list(Collection.SALES)
    return [
        s for s in sales
        if s.get("status") == SaleStatus.PENDING.value and (s.get("uniqueCode") or "").upper() == wanted
    ]


async def promoter_history(repo: BaseRepository, promoter_id: str) -> Dict[str, List[Dict[str, Any]]]:
    """A promoter's own sales and feedback, newest first"""
    sales = await repo.list(Collection.SALES)
    feedbacks = await repo.list(Collection.FEEDBACKS)
    return {
        "sales": newest_first([s for s in sales if s.get("promoterId") == promoter_id]),
        "feedbacks": newest_first([f for f in feedbacks if f.get("promoterId") == promoter_id]),
    }
