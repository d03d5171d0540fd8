from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..app_logger import get_logger
from ..claims.model import ClaimLogFilter
from ..core.exceptions import ValidationError
from .mailer import Attachment, Mailer
from .service import FreemealReportService

logger = get_logger(__name__)

SUBJECT = "Free Meal Logs - Previous Week"

BODY_HTML = """\
<p>Good Day,</p>

<p>
  Attached is the <strong>Free Meal Logs CSV Report</strong> for the <strong>previous week
  ({start} through {end})</strong>.
</p>

<p>This report is <strong>sent every Monday at 12:00 PM.</strong></p>

<p>
  Please review the attached CSV file for detailed information on free meal claims made during this period.
</p>

<p>Thank you.</p>
"""


def parse_recipients(value) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.replace(";", ",").split(",")
    return [v.strip() for v in value if v and v.strip()]


@dataclass(frozen=True)
class WeeklyReportResult:
    filename: str
    recipients: Sequence[str]
    rows: int


class WeeklyReportService:
    """Mail last week's (Monday..Sunday) claim log as CSV."""

    def __init__(self, reports: FreemealReportService, mailer: Mailer, *, recipients):
        self._reports = reports
        self._mailer = mailer
        self._recipients = parse_recipients(recipients)

    def send_previous_week(self) -> WeeklyReportResult:
        if not self._recipients:
            raise ValidationError("REPORT_RECIPIENTS is not set")

        start, end = self._reports.previous_week()
        report = self._reports.export_csv(ClaimLogFilter(), previous_week=True)

        self._mailer.send(
            to=self._recipients,
            subject=SUBJECT,
            html=BODY_HTML.format(start=start.strftime("%b %d"), end=end.strftime("%b %d, %Y")),
            attachments=[Attachment(filename=report.filename, content=report.content_bytes)],
        )
        logger.info("weekly report %s sent (%d rows)", report.filename, report.rows)
        return WeeklyReportResult(filename=report.filename, recipients=list(self._recipients), rows=report.rows)
