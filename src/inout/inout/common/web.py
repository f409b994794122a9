from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.exceptions import ActionInProgress, AuthorizationError, DomainError, OutOfRange, SchemaError, StoreWriteError

logger = logging.getLogger(__name__)


def error_status(error: DomainError) -> int:
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, ActionInProgress):
        return 409
    if isinstance(error, (SchemaError, StoreWriteError)):
        return 500
    return 400


def error_response(error: DomainError):
    body = {"success": False, "code": error.code, "message": str(error)}
    if isinstance(error, OutOfRange):
        body["distance_meters"] = round(error.distance_meters, 1)
        body["radius_meters"] = error.radius_meters
    return jsonify(body), error_status(error)


def system_error(message: str = "Internal server error"):
    return jsonify({"success": False, "code": "internal_error", "message": message}), 500


def current_uid() -> str:
    return str(session["uid"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("uid"):
            return jsonify({"success": False, "code": "unauthenticated", "message": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def json_endpoint(view):
    """Map domain errors to JSON bodies; log anything else as a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return system_error()

    return wrapper
