"""
PromoterPro - Service Complaints

Logged by Customer Service (with customer details) or by the Team Lead
(internal issues). Resolution and archival go through workflow_state_machine.
"""

import base64
import binascii
import logging
from typing import Any, Dict, List

from config import MAX_ATTACHMENT_BYTES, generate_id, now_ms
from models import ComplaintCreate, ComplaintRecord, ComplaintSource, ComplaintStatus
from services.errors import SubmissionError
from services.kpi import active_complaints
from services.repository import BaseRepository, Collection
from services.sales import newest_first

logger = logging.getLogger("complaints")

INTERNAL_CUSTOMER_NAME = "Internal / Team Lead"
INTERNAL_CUSTOMER_MOBILE = "N/A"


def attachment_size(data_url: str) -> int:
    """Decoded size in bytes of a data URL (or raw base64) attachment"""
    payload = data_url.split(",", 1)[1] if data_url.startswith("data:") and "," in data_url else data_url
    try:
        return len(base64.b64decode(payload, validate=False))
    except (binascii.Error, ValueError):
        return len(payload.encode())


async def log_complaint(
    repo: BaseRepository,
    data: ComplaintCreate,
    submitted_by: ComplaintSource
) -> Dict[str, Any]:
    if not data.description.strip():
        raise SubmissionError("Complaint description is required")

    customer_name = data.customer_name.strip()
    customer_mobile = data.customer_mobile.strip()

    if submitted_by == ComplaintSource.CUSTOMER_SERVICE:
        if not customer_name:
            raise SubmissionError("Customer name is required")
    else:
        customer_name = customer_name or INTERNAL_CUSTOMER_NAME
        customer_mobile = customer_mobile or INTERNAL_CUSTOMER_MOBILE

    if data.attachment_url and attachment_size(data.attachment_url) > MAX_ATTACHMENT_BYTES:
        raise SubmissionError("File too large. Please select a file under 2MB.")

    complaint = ComplaintRecord(
        id=generate_id(),
        timestamp=now_ms(),
        customer_name=customer_name,
        customer_mobile=customer_mobile,
        description=data.description,
        priority=data.priority,
        status=ComplaintStatus.OPEN,
        submitted_by=submitted_by,
        attachment_url=data.attachment_url or None,
    ).to_record()

    await repo.add(Collection.COMPLAINTS, complaint)
    logger.info(
        f"[COMPLAINTS] {complaint['id']} logged by {submitted_by.value} priority={complaint['priority']}"
    )
    return complaint


async def list_complaints(repo: BaseRepository, include_archived: bool = False) -> List[Dict[str, Any]]:
    """Newest first; archived complaints only on request"""
    complaints = await repo.list(Collection.COMPLAINTS)
    if not include_archived:
        complaints = active_complaints(complaints)
    return newest_first(complaints)
