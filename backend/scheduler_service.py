"""
Scheduler pour les tâches automatiques PromoterPro
- Rafraîchissement du snapshot dashboard (toutes les 5 secondes par défaut)
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

import config
from services.refresh import SnapshotRefresher

logger = logging.getLogger("scheduler")

REFRESH_JOB_ID = "dashboard_refresh"


class TaskScheduler:
    """Gestionnaire de tâches planifiées"""

    def __init__(self, refresher: Optional[SnapshotRefresher] = None):
        self.scheduler = AsyncIOScheduler()
        self.refresher = refresher

    def start(self, refresh_seconds: Optional[int] = None):
        """Démarre le scheduler avec toutes les tâches"""
        if self.refresher is not None:
            self.schedule_refresh(refresh_seconds or config.DASHBOARD_REFRESH_SECONDS)

        if not self.scheduler.running:
            self.scheduler.start()
        logger.info("Scheduler démarré avec succès")

    def stop(self):
        """Arrête le scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler arrêté")

    def schedule_refresh(self, seconds: int):
        """(Re)programme le rafraîchissement périodique du snapshot"""
        self.scheduler.add_job(
            self.refresh_snapshot,
            IntervalTrigger(seconds=seconds),
            id=REFRESH_JOB_ID,
            name="Rafraîchissement dashboard",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Refresh dashboard programmé toutes les {seconds}s")

    def cancel_refresh(self) -> bool:
        """Annule le rafraîchissement; False s'il n'était pas programmé"""
        if self.scheduler.get_job(REFRESH_JOB_ID) is None:
            return False
        self.scheduler.remove_job(REFRESH_JOB_ID)
        logger.info("Refresh dashboard annulé")
        return True

    @property
    def refresh_scheduled(self) -> bool:
        return self.scheduler.get_job(REFRESH_JOB_ID) is not None

    # ==================== TÂCHES PLANIFIÉES ====================

    async def refresh_snapshot(self):
        """Relit toutes les collections et publie le snapshot"""
        try:
            snapshot = await self.refresher.refresh()
            logger.debug(
                f"Snapshot rafraîchi: {len(snapshot.sales)} ventes, "
                f"{len(snapshot.complaints)} plaintes"
            )
        except Exception as e:
            logger.error(f"Erreur refresh dashboard: {str(e)}")
