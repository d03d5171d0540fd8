"""Background scheduling for the weekly free meal report."""

from __future__ import annotations

from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..app_logger import get_logger
from ..core.constants import DEFAULT_REPORT_CRON, DEFAULT_REPORT_TIMEZONE
from .weekly import WeeklyReportService

logger = get_logger(__name__)

JOB_ID = "weekly_freemeal_report"


class WeeklyReportScheduler:
    """Owns the APScheduler instance that mails the previous week's report."""

    def __init__(
        self,
        weekly: WeeklyReportService,
        *,
        cron_expression: str = DEFAULT_REPORT_CRON,
        timezone: str = DEFAULT_REPORT_TIMEZONE,
    ) -> None:
        self._weekly = weekly
        self._cron_expression = cron_expression
        self._timezone = timezone
        self.scheduler: Optional[BackgroundScheduler] = None

    def initialize(self) -> None:
        if self.scheduler is not None:
            logger.warning("Scheduler already initialized")
            return

        self.scheduler = BackgroundScheduler(
            timezone=self._timezone,
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 3600,
            },
        )
        self.scheduler.add_job(
            self.run_job,
            trigger=CronTrigger.from_crontab(self._cron_expression, timezone=self._timezone),
            id=JOB_ID,
            name="Weekly Free Meal Report",
            replace_existing=True,
        )
        logger.info("weekly report job registered with cron %r (%s)", self._cron_expression, self._timezone)

    def run_job(self) -> None:
        # Runs on a scheduler thread; failures are logged and retried next week.
        try:
            self._weekly.send_previous_week()
        except Exception:
            logger.exception("weekly report job failed")

    def start(self) -> None:
        if self.scheduler is None:
            self.initialize()
        if self.scheduler.running:
            logger.warning("Scheduler already running")
            return
        self.scheduler.start()
        logger.info("Scheduler started")

    def shutdown(self, wait: bool = True) -> None:
        if self.scheduler is None or not self.scheduler.running:
            logger.warning("Scheduler not running")
            return
        self.scheduler.shutdown(wait=wait)
        logger.info("Scheduler shutdown (wait=%s)", wait)

    def next_run_time(self):
        if self.scheduler is None:
            return None
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
