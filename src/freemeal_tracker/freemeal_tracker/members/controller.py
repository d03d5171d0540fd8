from __future__ import annotations

from flask import Flask, jsonify, request

from ..app_logger import get_logger
from ..common.http import admin_required, arg_int, json_error
from ..common.validators import optional_int
from ..core.constants import DEFAULT_MEMBERS_PAGE_SIZE
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from .model import CATEGORY_BY_SLUG

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.member_service

    def _category(slug: str):
        category = CATEGORY_BY_SLUG.get(slug)
        if category is None:
            raise NotFoundError(f"Unknown member type: {slug}")
        return category

    def _handle(action, message: str):
        try:
            return action()
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except Exception:
            logger.exception(message)
            return json_error(message, 500)

    @app.route("/api/admin/departments", methods=["GET"], endpoint="admin_departments")
    @admin_required
    def admin_departments():
        return _handle(
            lambda: (jsonify([d.to_dict() for d in service.departments()]), 200),
            "Failed to fetch departments",
        )

    @app.route("/api/admin/positions", methods=["GET"], endpoint="admin_positions")
    @admin_required
    def admin_positions():
        return _handle(
            lambda: (jsonify([p.to_dict() for p in service.positions()]), 200),
            "Failed to fetch positions",
        )

    @app.route("/api/admin/<slug>", methods=["GET"], endpoint="admin_members_list")
    @admin_required
    def admin_members_list(slug: str):
        def action():
            page = service.list_members(
                _category(slug),
                search=request.args.get("search"),
                department_id=optional_int(request.args.get("department"), "department"),
                position_id=optional_int(request.args.get("position"), "position"),
                status=request.args.get("status"),
                page=arg_int("page", 1, minimum=1, maximum=10**9),
                limit=arg_int("limit", DEFAULT_MEMBERS_PAGE_SIZE, minimum=1),
            )
            return jsonify(page.to_dict()), 200

        return _handle(action, f"Failed to fetch {slug}")

    @app.route("/api/admin/<slug>", methods=["POST"], endpoint="admin_members_create")
    @admin_required
    def admin_members_create(slug: str):
        def action():
            data = request.get_json(silent=True) or {}
            member = service.create_member(_category(slug), data)
            return jsonify({"success": True, "data": member.to_dict()}), 201

        return _handle(action, f"Failed to create {slug}")

    @app.route("/api/admin/<slug>/<int:member_id>", methods=["GET"], endpoint="admin_members_get")
    @admin_required
    def admin_members_get(slug: str, member_id: int):
        return _handle(
            lambda: (jsonify(service.get_member(_category(slug), member_id).to_dict()), 200),
            f"Failed to fetch {slug}",
        )

    @app.route("/api/admin/<slug>/<int:member_id>", methods=["PUT"], endpoint="admin_members_update")
    @admin_required
    def admin_members_update(slug: str, member_id: int):
        def action():
            data = request.get_json(silent=True) or {}
            member = service.update_member(_category(slug), member_id, data)
            return jsonify({"success": True, "data": member.to_dict()}), 200

        return _handle(action, f"Failed to update {slug}")

    @app.route("/api/admin/<slug>/<int:member_id>", methods=["DELETE"], endpoint="admin_members_delete")
    @admin_required
    def admin_members_delete(slug: str, member_id: int):
        def action():
            service.delete_member(_category(slug), member_id)
            return jsonify({"success": True}), 200

        return _handle(action, f"Failed to delete {slug}")
