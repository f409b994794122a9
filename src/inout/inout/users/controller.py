from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_uid, json_endpoint, login_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import user_to_document


def register(app: Flask, container: Container) -> None:
    users = container.user_service

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    @json_endpoint
    def me():
        return jsonify({"success": True, "user": user_to_document(users.require(current_uid()))})

    @app.route("/api/me", methods=["POST"], endpoint="me_register")
    @login_required
    @json_endpoint
    def me_register():
        """Create the signed-in user's profile; an admin approves it later."""
        data = _body()
        user = users.register(
            uid=current_uid(),
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone"),
        )
        return jsonify({"success": True, "user": user_to_document(user)}), 201

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @login_required
    @json_endpoint
    def admin_users():
        current = users.require(current_uid())
        return jsonify({"success": True, "users": [user_to_document(u) for u in users.list_users(current=current)]})

    @app.route("/api/admin/users/<uid>/approve", methods=["POST"], endpoint="admin_user_approve")
    @login_required
    @json_endpoint
    def admin_user_approve(uid: str):
        approved = bool(_body().get("approved", True))
        users.set_approved(current=users.require(current_uid()), uid=uid, approved=approved)
        return jsonify({"success": True})

    @app.route("/api/admin/users/<uid>/role", methods=["POST"], endpoint="admin_user_role")
    @login_required
    @json_endpoint
    def admin_user_role(uid: str):
        value = str(_body().get("role", "")).lower()
        try:
            role = Role(value)
        except ValueError:
            raise ValidationError(f"Unknown role: {value!r}")
        users.set_role(current=users.require(current_uid()), uid=uid, role=role)
        return jsonify({"success": True})

    @app.route("/api/admin/users/<uid>/employee-id", methods=["POST"], endpoint="admin_user_employee_id")
    @login_required
    @json_endpoint
    def admin_user_employee_id(uid: str):
        users.assign_employee_id(current=users.require(current_uid()), uid=uid, employee_id=str(_body().get("employee_id", "")))
        return jsonify({"success": True})

    @app.route("/api/admin/users/<uid>/location", methods=["POST"], endpoint="admin_user_location")
    @login_required
    @json_endpoint
    def admin_user_location(uid: str):
        location_id = _body().get("location_id") or None
        users.assign_location(current=users.require(current_uid()), uid=uid, location_id=location_id)
        return jsonify({"success": True})
