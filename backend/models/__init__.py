"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  PromoterPro - Models Package                                                ║
║                                                                              ║
║  Exports tous les modèles pour import facile                                 ║
║  from models import SaleStatus, ComplaintRecord, KPIStats, etc.              ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from .common import CamelModel

# Auth
from .auth import (
    UserRole,
    PromoterAuthMode,
    UserLogin,
    PasswordCreate,
    PasswordLogin,
    PasswordReset,
    SessionResponse,
)

# Promoters & Floors
from .team import (
    Floor,
    Promoter,
    PromoterCreate,
    PromoterUpdate,
    FloorCreate,
    FloorToggle,
)

# Sales
from .sale import (
    TicketType,
    SaleStatus,
    CustomerData,
    SaleRecord,
    SaleSubmit,
    SaleStatusUpdate,
)

# Complaints
from .complaint import (
    ComplaintPriority,
    ComplaintStatus,
    ComplaintSource,
    ComplaintRecord,
    ComplaintCreate,
    ComplaintResolve,
)

# Feedback
from .feedback import (
    FeedbackRecord,
    FeedbackSubmit,
)

# KPI
from .stats import (
    KPIStats,
    ComplaintSummary,
)

__all__ = [
    "CamelModel",
    # Auth
    "UserRole",
    "PromoterAuthMode",
    "UserLogin",
    "PasswordCreate",
    "PasswordLogin",
    "PasswordReset",
    "SessionResponse",
    # Team
    "Floor",
    "Promoter",
    "PromoterCreate",
    "PromoterUpdate",
    "FloorCreate",
    "FloorToggle",
    # Sales
    "TicketType",
    "SaleStatus",
    "CustomerData",
    "SaleRecord",
    "SaleSubmit",
    "SaleStatusUpdate",
    # Complaints
    "ComplaintPriority",
    "ComplaintStatus",
    "ComplaintSource",
    "ComplaintRecord",
    "ComplaintCreate",
    "ComplaintResolve",
    # Feedback
    "FeedbackRecord",
    "FeedbackSubmit",
    # KPI
    "KPIStats",
    "ComplaintSummary",
]
