from __future__ import annotations

import io
import json

from flask import Flask, jsonify, request, send_file, session

from ..common.web import current_uid, json_endpoint, login_required
from ..container import Container
from ..core.exceptions import ValidationError


def _config_json(value) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value or "")


def register(app: Flask, container: Container) -> None:
    tenants = container.tenant_service
    users = container.user_service

    def _signed_in_user():
        uid = session.get("uid")
        return container.users_repo.get_by_uid(uid) if uid is not None else None

    def _tenant_json() -> dict:
        payload = tenants.current
        if payload is None:
            return {"configured": False}
        return {
            "configured": True,
            "company_name": payload.company_name,
            "project_id": payload.tenant_project_id,
            "timestamp": payload.timestamp,
        }

    @app.route("/api/tenant", methods=["GET"], endpoint="tenant_current")
    @json_endpoint
    def tenant_current():
        return jsonify({"success": True, **_tenant_json()})

    @app.route("/api/tenant/config", methods=["POST"], endpoint="tenant_config")
    @json_endpoint
    def tenant_config():
        """Upload the backend config file; first setup, or admin reconfiguration."""
        data = request.get_json(silent=True) or {}
        kwargs = dict(
            backend_config_json=_config_json(data.get("backend_config")),
            company_name=str(data.get("company_name", "")),
            tenant_project_id=str(data.get("project_id", "")),
        )
        if tenants.current is None:
            changed = tenants.configure(**kwargs)
        else:
            uid = session.get("uid")
            if uid is None:
                return jsonify({"success": False, "code": "unauthenticated", "message": "Please sign in to continue"}), 401
            changed = tenants.reconfigure(current=users.require(uid), **kwargs)
        return jsonify({"success": True, "changed": changed, **_tenant_json()})

    @app.route("/api/admin/qr", methods=["GET"], endpoint="admin_qr_token")
    @login_required
    @json_endpoint
    def admin_qr_token():
        token = tenants.generate_qr_token(current=users.require(current_uid()))
        return jsonify({"success": True, "token": token})

    @app.route("/admin/qr/image", methods=["GET"], endpoint="admin_qr_image")
    @login_required
    @json_endpoint
    def admin_qr_image():
        """Company QR as PNG; ``?download=1`` serves it as an attachment."""
        png = tenants.generate_qr_png(current=users.require(current_uid()))
        return send_file(
            io.BytesIO(png),
            mimetype="image/png",
            as_attachment=request.args.get("download") == "1",
            download_name="company_qr.png",
        )

    @app.route("/api/tenant/scan", methods=["POST"], endpoint="tenant_scan")
    @json_endpoint
    def tenant_scan():
        data = request.get_json(silent=True) or {}
        result = tenants.scan(str(data.get("code", "")), current=_signed_in_user())
        return jsonify({
            "success": True,
            "changed": result.changed,
            "message": f"Connected to {result.payload.company_name}",
            **_tenant_json(),
        })

    @app.route("/api/tenant/scan/image", methods=["POST"], endpoint="tenant_scan_image")
    @json_endpoint
    def tenant_scan_image():
        if "image" not in request.files:
            raise ValidationError("Image file is missing")
        result = tenants.scan_image(request.files["image"].read(), current=_signed_in_user())
        return jsonify({
            "success": True,
            "changed": result.changed,
            "message": f"Connected to {result.payload.company_name}",
            **_tenant_json(),
        })
