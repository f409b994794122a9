"""Device verification collaborators.

Biometric prompts and GPS fixes complete asynchronously on the device. Each is
modelled as a single-shot ``Future`` resolving to one of a fixed set of
outcomes; a future that raises (timeout, provider crash) counts as an error.
"""
from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, TypeVar

from ..core.enums import BiometricOutcome
from ..core.exceptions import ValidationError
from ..geo.geofence import GeoPoint

T = TypeVar("T")


@dataclass(frozen=True)
class BiometricResult:
    outcome: BiometricOutcome
    message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == BiometricOutcome.SUCCESS

    @classmethod
    def success(cls) -> "BiometricResult":
        return cls(BiometricOutcome.SUCCESS)

    @classmethod
    def failed(cls, message: str = "Fingerprint not recognized.") -> "BiometricResult":
        return cls(BiometricOutcome.FAILED, message)

    @classmethod
    def error(cls, message: str) -> "BiometricResult":
        return cls(BiometricOutcome.ERROR, message)


@dataclass(frozen=True)
class LocationResult:
    point: Optional[GeoPoint] = None
    error: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.point is not None

    @classmethod
    def fix(cls, lat: float, lng: float) -> "LocationResult":
        return cls(point=GeoPoint(float(lat), float(lng)))

    @classmethod
    def failure(cls, message: str) -> "LocationResult":
        return cls(error=message)


class BiometricAuthenticator(Protocol):
    def authenticate(self) -> "Future[BiometricResult]":
        raise NotImplementedError


class LocationProvider(Protocol):
    def get_current_location(self) -> "Future[LocationResult]":
        raise NotImplementedError


def resolved(value: T) -> "Future[T]":
    future: Future = Future()
    future.set_result(value)
    return future


class ReportedBiometric(BiometricAuthenticator):
    """Biometric result already obtained by the client device."""

    def __init__(self, result: BiometricResult):
        self._result = result

    def authenticate(self) -> "Future[BiometricResult]":
        return resolved(self._result)


class ReportedLocation(LocationProvider):
    """GPS fix already obtained by the client device."""

    def __init__(self, result: LocationResult):
        self._result = result

    def get_current_location(self) -> "Future[LocationResult]":
        return resolved(self._result)


def biometric_from_payload(data: Optional[Mapping[str, Any]]) -> BiometricResult:
    """Parse ``{"outcome": "success" | "failed" | "error", "message": ...}``."""
    if not data:
        return BiometricResult.error("Biometric result missing")
    try:
        outcome = BiometricOutcome(str(data.get("outcome", "")).lower())
    except ValueError:
        raise ValidationError(f"Unknown biometric outcome: {data.get('outcome')!r}")
    return BiometricResult(outcome, data.get("message"))


def location_from_payload(data: Optional[Mapping[str, Any]]) -> LocationResult:
    """Parse ``{"lat": .., "lng": ..}`` or ``{"error": "..."}``."""
    if not data:
        return LocationResult.failure("Location missing")
    if data.get("error"):
        return LocationResult.failure(str(data["error"]))
    try:
        return LocationResult.fix(float(data["lat"]), float(data["lng"]))
    except (KeyError, TypeError, ValueError):
        raise ValidationError("Location must contain numeric lat and lng")
