from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from .attendance.repository import DocumentAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.session import InFlightGuard
from .attendance.state_machine import AttendanceStateMachine
from .common.datetime_utils import now_local
from .database.bootstrap import apply_schema
from .database.connection import DatabaseConnection, DBConfig
from .locations.repository import DocumentLocationRepository
from .locations.service import Geocoder, LocationService
from .store.document_store import DocumentStore
from .store.memory_store import InMemoryDocumentStore
from .store.mysql_store import MySQLDocumentStore
from .tenants.backend_manager import BackendManager, RebindCallback
from .tenants.codec import TenantConfigCodec
from .tenants.service import TenantService
from .tenants.storage import EncryptedTenantConfigStore
from .users.repository import DocumentUserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    store: DocumentStore

    users_repo: DocumentUserRepository
    locations_repo: DocumentLocationRepository
    attendance_repo: DocumentAttendanceRepository

    codec: TenantConfigCodec
    backend_manager: BackendManager

    user_service: UserService
    location_service: LocationService
    attendance_service: AttendanceService
    tenant_service: TenantService


def build_store(settings: Mapping[str, Any]) -> DocumentStore:
    backend = str(settings.get("STORE_BACKEND", "memory")).lower()
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "mysql":
        conn = DatabaseConnection(DBConfig.from_dict(settings["DB_CONFIG"]))
        if settings.get("AUTO_INIT_DB"):
            apply_schema(conn)
        return MySQLDocumentStore(conn)
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def build_container(
    *,
    settings: Mapping[str, Any],
    store: Optional[DocumentStore] = None,
    on_rebind: Optional[RebindCallback] = None,
    geocoder: Optional[Geocoder] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    store = store if store is not None else build_store(settings)

    users_repo = DocumentUserRepository(store)
    locations_repo = DocumentLocationRepository(store)
    attendance_repo = DocumentAttendanceRepository(store)

    codec = TenantConfigCodec(str(settings["QR_SECRET"]), clock=clock)
    tenant_storage = EncryptedTenantConfigStore(settings["TENANT_CONFIG_PATH"], str(settings["TENANT_STORAGE_SECRET"]))
    backend_manager = BackendManager(tenant_storage, on_rebind=on_rebind)

    user_service = UserService(users_repo, locations_repo)
    location_service = LocationService(
        locations_repo,
        default_radius_meters=float(settings.get("DEFAULT_RADIUS_METERS", 100.0)),
        geocoder=geocoder,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        locations_repo,
        state_machine=AttendanceStateMachine(clock=clock),
        guard=InFlightGuard(),
        clock=clock,
    )
    tenant_service = TenantService(codec, backend_manager, qr_image_size=int(settings.get("QR_IMAGE_SIZE", 512)))

    return Container(
        store=store,
        users_repo=users_repo,
        locations_repo=locations_repo,
        attendance_repo=attendance_repo,
        codec=codec,
        backend_manager=backend_manager,
        user_service=user_service,
        location_service=location_service,
        attendance_service=attendance_service,
        tenant_service=tenant_service,
    )
