from __future__ import annotations

import csv
import io
from datetime import date, datetime

import pytest

from src.freemeal_tracker.freemeal_tracker.claims.model import ClaimLogFilter
from src.freemeal_tracker.freemeal_tracker.core.enums import ClaimStatus
from src.freemeal_tracker.freemeal_tracker.core.exceptions import ValidationError
from src.freemeal_tracker.freemeal_tracker.reports.service import CSV_HEADERS, FreemealReportService, build_log_filter


@pytest.fixture
def seeded(claims, log_row):
    claims.log_rows = [
        log_row(1, "E-100", "Juan Dela Cruz", datetime(2024, 5, 27, 8, 0)),
        log_row(2, "I-200", "Maria Santos", datetime(2024, 5, 29, 12, 15), status=ClaimStatus.CLAIMED_ALREADY, person_type="intern", position="Developer"),
        log_row(3, "T-300", "Rizal, Jose", datetime(2024, 6, 2, 18, 30), person_type="trainee"),
        log_row(4, "E-100", "Juan Dela Cruz", datetime(2024, 6, 3, 7, 55)),
        log_row(5, "I-200", "Maria Santos", datetime(2024, 6, 3, 8, 10), status=ClaimStatus.CLAIMED_ALREADY, person_type="intern"),
    ]
    return claims


@pytest.fixture
def reports(seeded, fixed_now):
    return FreemealReportService(seeded, clock=lambda: fixed_now)


def _rows(report):
    return list(csv.reader(io.StringIO(report.content)))


def test_build_log_filter_normalizes_query_values():
    f = build_log_filter(search=" juan ", log_type="claimed_already", person_type="ALL", position_id="3")

    assert f.search == "juan"
    assert f.status == ClaimStatus.CLAIMED_ALREADY
    assert f.person_type is None
    assert f.position_id == 3
    assert build_log_filter(log_type="ALL").status is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"log_type": "EATEN"},
        {"person_type": "contractor"},
        {"start_date": date(2024, 6, 3), "end_date": date(2024, 6, 1)},
    ],
)
def test_build_log_filter_rejects_bad_values(kwargs):
    with pytest.raises(ValidationError):
        build_log_filter(**kwargs)


def test_list_logs_pages(reports):
    page = reports.list_logs(ClaimLogFilter(), page=2, limit=2)

    assert page["total"] == 5
    assert page["pages"] == 3
    assert [r["id"] for r in page["data"]] == [3, 2]


def test_export_csv_headers_and_row_shape(reports):
    report = reports.export_csv(ClaimLogFilter(search="rizal"))

    rows = _rows(report)
    assert rows[0] == CSV_HEADERS
    assert rows[1] == ["2024-06-02", "T-300", "Rizal, Jose", "Agent", "18:30:00", "trainee", "CLAIMED"]
    assert report.rows == 1
    assert report.filename == "freemeal_logs_2024-06-03.csv"
    assert report.content_bytes.startswith(b"\xef\xbb\xbf")


def test_export_previous_week_uses_monday_to_sunday(reports, seeded):
    report = reports.export_csv(ClaimLogFilter(), previous_week=True)

    assert report.filename == "freemeal_logs_2024-05-27_to_2024-06-02.csv"
    assert [r[1] for r in _rows(report)[1:]] == ["T-300", "I-200", "E-100"]
    used = seeded.seen_filters[-1]
    assert (used.start_date, used.end_date) == (date(2024, 5, 27), date(2024, 6, 2))


def test_export_filename_with_open_ended_range(reports):
    report = reports.export_csv(ClaimLogFilter(start_date=date(2024, 6, 1)))

    assert report.filename == "freemeal_logs_2024-06-01_to_end.csv"
    assert report.rows == 3


def test_stats_are_for_today(reports, seeded, fixed_now):
    s = reports.stats()

    assert seeded.stats_days == [fixed_now.date()]
    assert (s.today_count, s.claimed_today, s.already_claimed_today, s.total_logs) == (2, 1, 1, 5)
