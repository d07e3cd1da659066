"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  PromoterPro - Modèle Complaint                                              ║
║                                                                              ║
║  Statuts: Open (initial) -> Resolved (terminal)                              ║
║  "In Progress" existe dans le modèle mais aucun flux ne le produit           ║
║  isArchived: masque une plainte Resolved des vues actives, reste exportée    ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from enum import Enum
from typing import Optional
from pydantic import Field

from .common import CamelModel


class ComplaintPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ComplaintStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class ComplaintSource(str, Enum):
    CUSTOMER_SERVICE = "Customer Service"
    TEAM_LEAD = "Team Lead"


class ComplaintRecord(CamelModel):
    id: str
    timestamp: int
    customer_name: str
    customer_mobile: str = ""
    description: str
    priority: ComplaintPriority = ComplaintPriority.MEDIUM
    status: ComplaintStatus = ComplaintStatus.OPEN
    submitted_by: ComplaintSource
    resolution_notes: Optional[str] = None
    resolved_at: Optional[int] = None
    attachment_url: Optional[str] = None  # data URL
    is_archived: Optional[bool] = None


class ComplaintCreate(CamelModel):
    """
    Customer-service complaints carry the customer's name and mobile.
    Internal (Team Lead) complaints may omit them.
    """
    customer_name: str = ""
    customer_mobile: str = ""
    description: str = Field(..., min_length=1)
    priority: ComplaintPriority = ComplaintPriority.MEDIUM
    attachment_url: Optional[str] = None


class ComplaintResolve(CamelModel):
    resolution_notes: str = ""
