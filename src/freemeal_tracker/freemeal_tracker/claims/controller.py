from __future__ import annotations

from flask import Flask, jsonify, request

from ..app_logger import get_logger
from ..common.datetime_utils import parse_effective_timestamp
from ..common.http import arg_int, json_error
from ..core.constants import DEFAULT_RECENT_LOGS_LIMIT
from ..core.exceptions import InternalError, NotFoundError, ValidationError
from ..container import Container

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.meal_claim_service

    @app.route("/api/attendance/add", methods=["POST"], endpoint="api_claim_add")
    def api_claim_add():
        """Kiosk scan: RFID tag (or typed ID number) -> claim decision.

        Optional ``time_claimed`` back-dates the claim (manual date override).
        """

        data = request.get_json(silent=True) or {}
        identifier = data.get("rfid_tag") or data.get("ashima_id") or data.get("person_identifier")
        if not identifier or not str(identifier).strip():
            return json_error("RFID tag is required.", 400)

        try:
            now = container.clock()
            effective = parse_effective_timestamp(data.get("time_claimed"), now=now)
            if effective is not None and effective.date() > now.date():
                raise ValidationError("time_claimed cannot be in the future.")

            decision = service.record_claim(str(identifier).strip(), effective_timestamp=effective)
            return jsonify(decision.to_dict()), 200
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except InternalError as e:
            logger.error("claim failed for %r: %s", identifier, e)
            return json_error(str(e), 500)
        except Exception:
            logger.exception("unexpected error processing free meal claim for %r", identifier)
            return json_error("Failed to process free meal logs.", 500)

    @app.route("/api/attendance/logs", methods=["GET"], endpoint="api_claim_logs")
    def api_claim_logs():
        try:
            limit = arg_int("limit", DEFAULT_RECENT_LOGS_LIMIT, minimum=1)
            offset = arg_int("offset", 0, maximum=10**9)
            rows = service.recent_claims(limit=limit, offset=offset)
            return jsonify({"logs": [r.to_dict() for r in rows]}), 200
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            logger.exception("failed to fetch recent claim logs")
            return json_error("Failed to fetch attendance logs.", 500)
