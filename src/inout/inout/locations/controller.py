from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_uid, json_endpoint, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from ..geo.geofence import GeoPoint
from .model import location_to_document


def _optional_float(data: dict, key: str):
    value = data.get(key)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")


def register(app: Flask, container: Container) -> None:
    locations = container.location_service
    users = container.user_service

    @app.route("/api/locations", methods=["GET"], endpoint="locations_list")
    @login_required
    @json_endpoint
    def locations_list():
        return jsonify({"success": True, "locations": [location_to_document(loc) for loc in locations.list_locations()]})

    @app.route("/api/admin/locations", methods=["POST"], endpoint="admin_location_create")
    @login_required
    @json_endpoint
    def admin_location_create():
        """Create from ``{"name", "lat", "lng"}`` or ``{"address"}``."""
        data = request.get_json(silent=True) or {}
        current = users.require(current_uid())
        radius = _optional_float(data, "radius_meters")

        if data.get("address"):
            location = locations.create_from_address(
                current=current,
                address=str(data["address"]),
                name=data.get("name"),
                radius_meters=radius,
            )
        else:
            lat, lng = _optional_float(data, "lat"), _optional_float(data, "lng")
            point = GeoPoint(lat, lng) if lat is not None and lng is not None else None
            location = locations.create(current=current, name=str(data.get("name", "")), point=point, radius_meters=radius)

        return jsonify({"success": True, "location": location_to_document(location)}), 201

    @app.route("/api/admin/locations/<location_id>", methods=["DELETE"], endpoint="admin_location_delete")
    @login_required
    @json_endpoint
    def admin_location_delete(location_id: str):
        locations.delete(current=users.require(current_uid()), location_id=location_id)
        return jsonify({"success": True})
