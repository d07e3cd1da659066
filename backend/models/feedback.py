"""
PromoterPro - Modèle Feedback (immuable après création)
"""

from pydantic import Field

from .common import CamelModel
from .sale import CustomerData


class FeedbackRecord(CamelModel):
    id: str
    promoter_id: str
    promoter_name: str
    customer: CustomerData
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    timestamp: int


class FeedbackSubmit(CamelModel):
    customer: CustomerData
    rating: int = 0
    comment: str = ""
