"""
PromoterPro - KPI (dérivés, jamais persistés)
"""

from .common import CamelModel


class KPIStats(CamelModel):
    promoter_id: str
    total_kiddo: int = 0
    total_extreme: int = 0
    total_individual: int = 0
    total_entry: int = 0
    total_sales_leads: int = 0   # count of verified sales
    total_mail_collect: int = 0  # verified sales with a real email
    revenue: float = 0           # no pricing model, always 0


class ComplaintSummary(CamelModel):
    open_count: int = 0
    resolved_today: int = 0
    high_priority: int = 0
