from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..common.schema import read_bool, read_float, read_int, read_str, read_str_list
from ..core.enums import AttendanceAction


def record_id(employee_id: str, date_id: str) -> str:
    """Document key of an employee's record for one day."""
    return f"{employee_id}_{date_id}"


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    employee_id: str
    employee_name: str
    date_id: str
    created_timestamp: int
    check_in_time: Optional[str] = None
    check_in_lat: Optional[float] = None
    check_in_lng: Optional[float] = None
    check_out_time: Optional[str] = None
    check_out_lat: Optional[float] = None
    check_out_lng: Optional[float] = None
    total_hours: Optional[str] = None
    distance_meters: float = 0.0
    location_name: Optional[str] = None
    last_verified_location_id: Optional[str] = None
    movement_log: tuple[str, ...] = field(default_factory=tuple)
    fingerprint_verified: bool = False
    location_verified: bool = False

    @property
    def record_id(self) -> str:
        return record_id(self.employee_id, self.date_id)

    @property
    def is_completed(self) -> bool:
        return self.check_out_time is not None


def record_from_document(doc: Mapping[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        employee_id=read_str(doc, "employeeId"),
        employee_name=read_str(doc, "employeeName", ""),
        date_id=read_str(doc, "dateId"),
        created_timestamp=read_int(doc, "createdTimestamp", 0),
        check_in_time=read_str(doc, "checkInTime", None),
        check_in_lat=read_float(doc, "checkInLat", None),
        check_in_lng=read_float(doc, "checkInLng", None),
        check_out_time=read_str(doc, "checkOutTime", None),
        check_out_lat=read_float(doc, "checkOutLat", None),
        check_out_lng=read_float(doc, "checkOutLng", None),
        total_hours=read_str(doc, "totalHours", None),
        distance_meters=read_float(doc, "distanceMeters", 0.0),
        location_name=read_str(doc, "locationName", None),
        last_verified_location_id=read_str(doc, "lastVerifiedLocationId", None),
        movement_log=read_str_list(doc, "movementLog"),
        fingerprint_verified=read_bool(doc, "fingerprintVerified", False),
        location_verified=read_bool(doc, "locationVerified", False),
    )


def record_to_document(record: AttendanceRecord) -> dict[str, Any]:
    return {
        "recordId": record.record_id,
        "employeeId": record.employee_id,
        "employeeName": record.employee_name,
        "dateId": record.date_id,
        "createdTimestamp": record.created_timestamp,
        "checkInTime": record.check_in_time,
        "checkInLat": record.check_in_lat,
        "checkInLng": record.check_in_lng,
        "checkOutTime": record.check_out_time,
        "checkOutLat": record.check_out_lat,
        "checkOutLng": record.check_out_lng,
        "totalHours": record.total_hours,
        "distanceMeters": record.distance_meters,
        "locationName": record.location_name,
        "lastVerifiedLocationId": record.last_verified_location_id,
        "movementLog": list(record.movement_log),
        "fingerprintVerified": record.fingerprint_verified,
        "locationVerified": record.location_verified,
    }


@dataclass(frozen=True)
class AttendanceCommit:
    """Mutation to apply to one attendance document.

    ``create`` commits overwrite the document; other commits are partial
    updates whose ``append_movement`` (if any) is appended to ``movementLog``.
    """

    action: AttendanceAction
    record_id: str
    fields: Mapping[str, Any]
    create: bool = False
    append_movement: Optional[str] = None
    distance_meters: float = 0.0
