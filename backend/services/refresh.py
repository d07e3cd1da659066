"""
PromoterPro - Dashboard snapshot refresh

A snapshot is the whole dataset re-read at once plus the derived KPIs.
The scheduler (scheduler_service.TaskScheduler) calls refresh() on a timer;
views only ever read `latest`.

LIMITATION (accepted): a refresh is not serialised with user writes. If a
refresh reads the store while a write is still in flight, the published
snapshot is stale until the next tick and overrides any optimistic local
state derived from that write.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from config import now_ms
from models import ComplaintSummary, KPIStats
from services.kpi import aggregate_kpis, summarize_complaints
from services.repository import BaseRepository, Collection
from services.sales import newest_first

logger = logging.getLogger("refresh")


@dataclass
class DashboardSnapshot:
    promoters: List[Dict[str, Any]] = field(default_factory=list)
    floors: List[Dict[str, Any]] = field(default_factory=list)
    sales: List[Dict[str, Any]] = field(default_factory=list)
    complaints: List[Dict[str, Any]] = field(default_factory=list)  # newest first
    feedbacks: List[Dict[str, Any]] = field(default_factory=list)
    stats: List[KPIStats] = field(default_factory=list)
    complaint_summary: ComplaintSummary = field(default_factory=ComplaintSummary)
    loaded_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "promoters": self.promoters,
            "floors": self.floors,
            "sales": self.sales,
            "complaints": self.complaints,
            "feedbacks": self.feedbacks,
            "stats": [s.model_dump(by_alias=True) for s in self.stats],
            "complaintSummary": self.complaint_summary.model_dump(by_alias=True),
            "loadedAt": self.loaded_at,
        }


async def load_snapshot(repo: BaseRepository) -> DashboardSnapshot:
    promoters, sales, floors, complaints, feedbacks = await asyncio.gather(
        repo.list(Collection.PROMOTERS),
        repo.list(Collection.SALES),
        repo.list(Collection.FLOORS),
        repo.list(Collection.COMPLAINTS),
        repo.list(Collection.FEEDBACKS),
    )

    return DashboardSnapshot(
        promoters=promoters,
        floors=floors,
        sales=sales,
        complaints=newest_first(complaints),
        feedbacks=feedbacks,
        stats=aggregate_kpis(promoters, sales),
        complaint_summary=summarize_complaints(complaints),
        loaded_at=now_ms(),
    )


Listener = Callable[[DashboardSnapshot], None]


class SnapshotRefresher:
    """Holds the latest snapshot; apply_latest_snapshot is the only way to change it"""

    def __init__(self, repo: BaseRepository):
        self.repo = repo
        self.latest: Optional[DashboardSnapshot] = None
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def apply_latest_snapshot(self, snapshot: DashboardSnapshot) -> None:
        """Replace view state wholesale"""
        self.latest = snapshot
        for listener in self._listeners:
            listener(snapshot)

    async def refresh(self) -> DashboardSnapshot:
        snapshot = await load_snapshot(self.repo)
        self.apply_latest_snapshot(snapshot)
        return snapshot

    async def current(self) -> DashboardSnapshot:
        """Latest snapshot, loading one if none has been applied yet"""
        if self.latest is None:
            return await self.refresh()
        return self.latest
