"""
PromoterPro - KPI Aggregation

Only Verified sales count. Every promoter in the input gets exactly one
KPIStats, in input order, zero-filled when they have no verified sale.
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from models import (
    ComplaintPriority,
    ComplaintStatus,
    ComplaintSummary,
    KPIStats,
    SaleStatus,
    TicketType,
)

# An email shorter than this is a placeholder ("-", "na"), not a captured address
MIN_REAL_EMAIL_LENGTH = 4


def has_real_email(sale: Dict[str, Any]) -> bool:
    email = (sale.get("customer") or {}).get("email") or ""
    return len(email) >= MIN_REAL_EMAIL_LENGTH


def aggregate_kpis(promoters: List[Dict[str, Any]], sales: List[Dict[str, Any]]) -> List[KPIStats]:
    verified_by_promoter = defaultdict(list)
    for sale in sales:
        if sale.get("status") == SaleStatus.VERIFIED.value:
            verified_by_promoter[sale.get("promoterId")].append(sale)

    stats = []
    for promoter in promoters:
        p_sales = verified_by_promoter.get(promoter.get("id"), [])

        def total(ticket: TicketType) -> int:
            return sum(int((s.get("items") or {}).get(ticket.value) or 0) for s in p_sales)

        stats.append(KPIStats(
            promoter_id=promoter.get("id"),
            total_kiddo=total(TicketType.KIDDO),
            total_extreme=total(TicketType.EXTREME),
            total_individual=total(TicketType.INDIVIDUAL),
            total_entry=total(TicketType.ENTRY_ONLY),
            total_sales_leads=len(p_sales),
            total_mail_collect=sum(1 for s in p_sales if has_real_email(s)),
            revenue=0,
        ))

    return stats


def active_complaints(complaints: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Complaints still shown on dashboards (archived ones are hidden)"""
    return [c for c in complaints if not c.get("isArchived")]


def summarize_complaints(
    complaints: List[Dict[str, Any]],
    today: Optional[date] = None
) -> ComplaintSummary:
    """Lead dashboard counters, computed on active complaints only"""
    today = today or date.today()
    visible = active_complaints(complaints)

    def on_today(ms: Optional[int]) -> bool:
        return bool(ms) and datetime.fromtimestamp(ms / 1000).date() == today

    return ComplaintSummary(
        open_count=sum(1 for c in visible if c.get("status") == ComplaintStatus.OPEN.value),
        resolved_today=sum(
            1 for c in visible
            if c.get("status") == ComplaintStatus.RESOLVED.value
            and on_today(c.get("resolvedAt") or c.get("timestamp"))
        ),
        high_priority=sum(1 for c in visible if c.get("priority") == ComplaintPriority.HIGH.value),
    )
