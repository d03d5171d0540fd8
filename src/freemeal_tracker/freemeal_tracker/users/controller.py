from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..app_logger import get_logger
from ..common.http import admin_required, json_error
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = request.get_json(silent=True) or request.form
        try:
            s_admin = container.auth_service.authenticate(
                data.get("username") or data.get("identifier") or "",
                data.get("password") or "",
            )
        except (AuthenticationError, ValidationError) as e:
            return json_error(str(e), 401)
        except Exception:
            logger.exception("login failed")
            return json_error("System error during login", 500)

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session["admin_id"] = s_admin.admin_id
        session["name"] = s_admin.name
        session["username"] = s_admin.username
        logger.info("admin %s logged in", s_admin.username)
        return jsonify({"success": True, "admin": {"id": s_admin.admin_id, "name": s_admin.name, "username": s_admin.username}})

    @app.route("/api/admin/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/admin/me", methods=["GET"], endpoint="admin_me")
    @admin_required
    def admin_me():
        s_admin = container.auth_service.get_session_admin(int(session["admin_id"]))
        if not s_admin:
            session.clear()
            return json_error("Login required", 401)
        return jsonify(
            {
                "id": s_admin.admin_id,
                "name": s_admin.name,
                "username": s_admin.username,
                "employee_id": s_admin.employee_id,
            }
        )
