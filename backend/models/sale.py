"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  PromoterPro - Modèle Sale                                                   ║
║                                                                              ║
║  RÈGLES:                                                                     ║
║  1. Une vente est créée PENDING par un promoteur                             ║
║  2. Seul le verifier la passe VERIFIED ou REJECTED (terminal)                ║
║  3. Une vente n'est jamais supprimée                                         ║
║  4. promoterName est un snapshot: pas de back-fill si renommage              ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from enum import Enum
from typing import Dict, Optional
from pydantic import Field

from .common import CamelModel


class TicketType(str, Enum):
    KIDDO = "Kiddo"
    EXTREME = "Extreme"
    INDIVIDUAL = "Individual"
    ENTRY_ONLY = "Entry Only"


class SaleStatus(str, Enum):
    PENDING = "Pending"
    VERIFIED = "Verified"
    REJECTED = "Rejected"


class CustomerData(CamelModel):
    name: str = ""
    mobile: str = ""
    email: str = ""
    location: str = ""
    age: int = Field(default=18, ge=0)


class SaleRecord(CamelModel):
    id: str
    promoter_id: str
    promoter_name: str
    unique_code: Optional[str] = None
    customer: CustomerData
    items: Dict[str, int] = {}
    total_amount: float = 0  # no pricing model
    status: SaleStatus = SaleStatus.PENDING
    timestamp: int
    sale_location: Optional[str] = None


class SaleSubmit(CamelModel):
    """Sale entry from a promoter (promoter comes from the session)"""
    customer: CustomerData
    items: Dict[TicketType, int] = {}
    sale_location: Optional[str] = None


class SaleStatusUpdate(CamelModel):
    status: SaleStatus
