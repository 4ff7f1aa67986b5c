"""Background scheduler for the recurring-transaction, reminder and cleanup jobs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .logging_config import get_logger
from .services import jobs

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger("scheduler")


class JobScheduler:
    """Runs the periodic jobs against one application context."""

    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.scheduler: BackgroundScheduler | None = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> None:
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self.scheduler = BackgroundScheduler()
        self.add_cron_job(
            self._run(jobs.process_recurring_transactions),
            job_id="recurring_transactions",
            name="Process Recurring Transactions",
            hour=0,
            minute=0,
        )
        self.add_cron_job(
            self._run(jobs.send_bill_reminders),
            job_id="bill_reminders",
            name="Bill Reminders",
            hour=8,
            minute=0,
        )
        self.add_cron_job(
            self._run(jobs.cleanup_expired_tokens),
            job_id="token_cleanup",
            name="Expired Token Cleanup",
            day_of_week="sun",
            hour=2,
            minute=0,
        )
        self.scheduler.start()
        logger.info("Background scheduler started")

    def stop(self) -> None:
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def _run(self, job: Callable[..., object]) -> Callable[[], None]:
        def runner() -> None:
            try:
                job(self.ctx)
            except Exception:
                logger.exception("Scheduled job failed", extra={"job": job.__name__})

        runner.__name__ = job.__name__
        return runner

    def add_cron_job(
        self,
        func: Callable,
        *,
        job_id: str,
        name: str | None = None,
        **cron_fields,
    ) -> None:
        """Register ``func`` under ``job_id`` on a cron schedule."""

        if self.scheduler is None:
            logger.warning("Cannot add job: scheduler not started", extra={"job_id": job_id})
            return

        self.scheduler.add_job(
            func=func,
            trigger=CronTrigger(**cron_fields),
            id=job_id,
            name=name or job_id,
            replace_existing=True,
        )
        logger.info("Added job", extra={"job_id": job_id})

    def job_ids(self) -> list[str]:
        if self.scheduler is None:
            return []
        return [job.id for job in self.scheduler.get_jobs()]
