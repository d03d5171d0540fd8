"""Send the previous week's free meal report.

    python scripts/weekly_report.py          # stay up, send every Monday 12:00 (REPORT_CRON)
    python scripts/weekly_report.py --now    # send once and exit
"""

from __future__ import annotations

import argparse
import importlib
import sys
import time
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.freemeal_tracker.freemeal_tracker.app_logger import get_logger, setup_logging
from src.freemeal_tracker.freemeal_tracker.container import build_container
from src.freemeal_tracker.freemeal_tracker.reports.scheduler import WeeklyReportScheduler

logger = get_logger("scripts.weekly_report")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--now", action="store_true", help="send once immediately and exit")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", None))

    container = build_container(
        db_config=settings.DB_CONFIG,
        smtp_config=settings.SMTP_CONFIG,
        from_name=settings.FROM_NAME,
        from_email=settings.FROM_EMAIL,
        report_recipients=settings.REPORT_RECIPIENTS,
    )

    if args.now:
        result = container.weekly_report_service.send_previous_week()
        print(f"OK: sent {result.filename} ({result.rows} rows) to {', '.join(result.recipients)}")
        return

    scheduler = WeeklyReportScheduler(
        container.weekly_report_service,
        cron_expression=settings.REPORT_CRON,
        timezone=settings.REPORT_TIMEZONE,
    )
    scheduler.start()
    logger.info("next run at %s", scheduler.next_run_time())
    try:
        while True:
            time.sleep(60)
    except (KeyboardInterrupt, SystemExit):
        scheduler.shutdown()


if __name__ == "__main__":
    main()
