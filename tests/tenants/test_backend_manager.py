from __future__ import annotations

import pytest

from src.inout.inout.core.exceptions import AuthorizationError, DecryptionFailed, ValidationError
from src.inout.inout.tenants.backend_manager import BackendManager
from src.inout.inout.tenants.codec import TenantConfigCodec
from src.inout.inout.tenants.model import TenantBootstrapPayload
from src.inout.inout.tenants.service import TenantService
from src.inout.inout.tenants.storage import EncryptedTenantConfigStore


@pytest.fixture
def storage(tmp_path):
    return EncryptedTenantConfigStore(tmp_path / "tenant.bin", "storage-secret")


@pytest.fixture
def rebinds():
    return []


@pytest.fixture
def manager(storage, rebinds):
    return BackendManager(storage, on_rebind=lambda options, payload: rebinds.append(options.project_id))


def _payload(config: str, timestamp: int = 1) -> TenantBootstrapPayload:
    return TenantBootstrapPayload(
        backend_config_json=config,
        company_name="Acme Corp",
        tenant_project_id="acme-attendance",
        timestamp=timestamp,
    )


def test_storage_is_encrypted_at_rest(storage, make_backend_config):
    storage.save(_payload(make_backend_config()))

    raw = storage.path.read_bytes()
    assert b"Acme" not in raw
    assert storage.load().company_name == "Acme Corp"


def test_storage_with_wrong_secret_cannot_load(storage, tmp_path, make_backend_config):
    storage.save(_payload(make_backend_config()))
    with pytest.raises(DecryptionFailed):
        EncryptedTenantConfigStore(storage.path, "other-secret").load()


def test_apply_is_idempotent_for_same_config(manager, storage, rebinds, make_backend_config):
    assert manager.apply(_payload(make_backend_config(), timestamp=1)) is True
    first_write = storage.path.stat().st_mtime_ns

    # Same config scanned again later: nothing is written or rebound.
    assert manager.apply(_payload(make_backend_config(), timestamp=2)) is False
    assert storage.path.stat().st_mtime_ns == first_write
    assert rebinds == ["acme-attendance"]


def test_apply_new_config_rebinds(manager, rebinds, make_backend_config):
    manager.apply(_payload(make_backend_config()))
    assert manager.apply(_payload(make_backend_config("other-tenant", "1:2:android:q"))) is True

    assert manager.current_options.project_id == "other-tenant"
    assert rebinds == ["acme-attendance", "other-tenant"]


def test_initialize_binds_stored_config(storage, make_backend_config):
    storage.save(_payload(make_backend_config()))

    bound = []
    manager = BackendManager(storage, on_rebind=lambda options, payload: bound.append(payload.company_name))

    assert manager.initialize().project_id == "acme-attendance"
    assert manager.is_configured
    assert bound == ["Acme Corp"]


def test_initialize_without_config_waits_for_setup(manager):
    assert manager.initialize() is None
    assert not manager.is_configured


def test_reset_forgets_tenant(manager, storage, make_backend_config):
    manager.apply(_payload(make_backend_config()))
    manager.reset()

    assert not storage.path.exists()
    assert manager.current_payload is None


def test_tenant_service_flow(manager, admin, employee, make_backend_config):
    service = TenantService(TenantConfigCodec("qr-secret"), manager, qr_image_size=512)

    with pytest.raises(ValidationError, match="Config not found"):
        service.generate_qr_token(current=admin)

    assert service.configure(
        backend_config_json=make_backend_config(), company_name="Acme Corp", tenant_project_id="acme-attendance"
    )
    with pytest.raises(AuthorizationError):
        service.configure(backend_config_json=make_backend_config(), company_name="Evil", tenant_project_id="evil")
    with pytest.raises(AuthorizationError):
        service.generate_qr_token(current=employee)

    token = service.generate_qr_token(current=admin)
    result = service.scan(token)

    assert result.changed is False
    assert result.payload.company_name == "Acme Corp"


def test_rejected_scan_keeps_existing_config(manager, make_backend_config):
    service = TenantService(TenantConfigCodec("qr-secret"), manager, qr_image_size=512)
    service.configure(backend_config_json=make_backend_config(), company_name="Acme Corp", tenant_project_id="acme-attendance")

    with pytest.raises(DecryptionFailed):
        service.scan("gAAAAAB-not-a-real-token")
    with pytest.raises(ValidationError):
        service.scan("   ")

    assert service.current.company_name == "Acme Corp"


def test_scan_of_other_tenant_needs_admin(manager, admin, employee, make_backend_config):
    codec = TenantConfigCodec("qr-secret")
    service = TenantService(codec, manager, qr_image_size=512)
    service.configure(backend_config_json=make_backend_config(), company_name="Acme Corp", tenant_project_id="acme-attendance")
    other = codec.encode(make_backend_config("other-attendance", "1:456:android:def"), "Other Co", "other-attendance")

    with pytest.raises(AuthorizationError):
        service.scan(other)
    with pytest.raises(AuthorizationError):
        service.scan(other, current=employee)
    assert service.current.tenant_project_id == "acme-attendance"

    assert service.scan(other, current=admin).changed is True
    assert service.current.tenant_project_id == "other-attendance"
