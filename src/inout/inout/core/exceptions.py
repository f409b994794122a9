from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"


class SchemaError(DomainError):
    """Raised when a stored document does not match the expected shape."""

    code = "schema_error"


class StoreWriteError(DomainError):
    """Raised when the document store rejects a write."""

    code = "store_write_failed"


class AttendanceError(DomainError):
    code = "attendance_error"


class ActionNotAllowed(AttendanceError):
    code = "action_not_allowed"


class LocationNotAssigned(AttendanceError):
    code = "location_not_assigned"


class ActionInProgress(AttendanceError):
    code = "action_in_progress"


class AuthenticationFailed(AttendanceError):
    """Biometric verification was declined, cancelled or errored."""

    code = "authentication_failed"


class LocationUnavailable(AttendanceError):
    code = "location_unavailable"


class OutOfRange(AttendanceError):
    """The location fix lies outside the assigned site's geofence."""

    code = "out_of_range"

    def __init__(self, message: str, *, distance_meters: float, radius_meters: float, location_name: Optional[str] = None):
        super().__init__(message)
        self.distance_meters = distance_meters
        self.radius_meters = radius_meters
        self.location_name = location_name


class TenantSetupError(DomainError):
    """QR onboarding failure. The user has to rescan or request a new code."""

    code = "tenant_setup_error"


class DecryptionFailed(TenantSetupError):
    code = "decryption_failed"


class MalformedPayload(TenantSetupError):
    code = "malformed_payload"


class InvalidBackendConfig(TenantSetupError):
    code = "invalid_backend_config"
