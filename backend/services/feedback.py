"""
PromoterPro - Service Feedback

Un feedback est créé une fois par un promoteur et n'est plus jamais modifié.
"""

import logging
from typing import Any, Dict, List

from config import generate_id, now_ms
from models import FeedbackRecord, FeedbackSubmit
from services.errors import SubmissionError
from services.repository import BaseRepository, Collection
from services.sales import validate_customer

logger = logging.getLogger("feedback")


async def submit_feedback(repo: BaseRepository, promoter: Dict[str, Any], data: FeedbackSubmit) -> Dict[str, Any]:
    if data.rating == 0:
        raise SubmissionError("Please provide a rating.")
    if not 1 <= data.rating <= 5:
        raise SubmissionError("Rating must be between 1 and 5.")
    validate_customer(data.customer)

    feedback = FeedbackRecord(
        id=generate_id(),
        promoter_id=promoter["id"],
        promoter_name=promoter.get("name", ""),
        customer=data.customer,
        rating=data.rating,
        comment=data.comment,
        timestamp=now_ms(),
    ).to_record()

    await repo.add(Collection.FEEDBACKS, feedback)
    logger.info(f"[FEEDBACK] {feedback['id']} rating={feedback['rating']} by {promoter['id']}")
    return feedback


async def list_feedbacks(repo: BaseRepository) -> List[Dict[str, Any]]:
    return await repo.list(Collection.FEEDBACKS)
