from __future__ import annotations

import hmac

from flask import Flask, jsonify, request

from ..app_logger import get_logger
from ..common.http import admin_required, arg_date, arg_int, json_error
from ..core.constants import DEFAULT_LOGS_PAGE_SIZE, PREVIOUS_WEEK
from ..core.exceptions import ValidationError
from ..container import Container
from .service import build_log_filter

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def _filters(*, dates: bool = True):
        return build_log_filter(
            search=request.args.get("search"),
            log_type=request.args.get("log_type"),
            person_type=request.args.get("person_type"),
            position_id=request.args.get("position"),
            start_date=arg_date("start_date") if dates else None,
            end_date=arg_date("end_date") if dates else None,
        )

    @app.route("/api/admin/freemeal-logs", methods=["GET"], endpoint="admin_freemeal_logs")
    @admin_required
    def admin_freemeal_logs():
        try:
            page = reports.list_logs(
                _filters(),
                page=arg_int("page", 1, minimum=1, maximum=10**9),
                limit=arg_int("limit", DEFAULT_LOGS_PAGE_SIZE, minimum=1),
            )
            return jsonify(page), 200
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            logger.exception("failed to fetch free meal logs")
            return json_error("Failed to fetch free meal logs", 500)

    @app.route("/api/admin/freemeal-logs/export", methods=["GET"], endpoint="admin_freemeal_logs_export")
    @admin_required
    def admin_freemeal_logs_export():
        previous_week = PREVIOUS_WEEK in (request.args.get("start_date"), request.args.get("end_date"))
        try:
            report = reports.export_csv(_filters(dates=not previous_week), previous_week=previous_week)
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            logger.exception("failed to export free meal logs")
            return json_error("Failed to export free meal logs", 500)

        return app.response_class(
            report.content_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
        )

    @app.route("/api/admin/freemeal-logs/stats", methods=["GET"], endpoint="admin_freemeal_logs_stats")
    @admin_required
    def admin_freemeal_logs_stats():
        try:
            s = reports.stats()
        except Exception:
            logger.exception("failed to compute free meal stats")
            return json_error("Failed to fetch free meal stats", 500)
        return jsonify(
            {
                "today_count": s.today_count,
                "claimed_today": s.claimed_today,
                "already_claimed_today": s.already_claimed_today,
                "total_logs": s.total_logs,
            }
        )

    @app.route("/api/reports/send-previous-week", methods=["POST"], endpoint="reports_send_previous_week")
    def reports_send_previous_week():
        secret = app.config.get("CRON_SECRET") or ""
        auth = request.headers.get("Authorization", "")
        if not secret or not hmac.compare_digest(auth.encode("utf-8"), f"Bearer {secret}".encode("utf-8")):
            return jsonify({"error": "Unauthorized"}), 401

        try:
            result = container.weekly_report_service.send_previous_week()
        except Exception:
            logger.exception("failed to send previous week report")
            return jsonify({"error": "Failed to send report"}), 500

        return jsonify(
            {
                "success": True,
                "message": "Previous week report sent successfully",
                "filename": result.filename,
                "rows": result.rows,
            }
        )
