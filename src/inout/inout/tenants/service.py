from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import AuthorizationError, TenantSetupError, ValidationError
from ..users.model import User
from .backend_manager import BackendManager
from .codec import TenantConfigCodec
from .model import TenantBootstrapPayload
from .qr import decode_qr_image, render_qr_png

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    payload: TenantBootstrapPayload
    changed: bool


class TenantService:
    """Use case: company onboarding through the encrypted QR code."""

    def __init__(self, codec: TenantConfigCodec, backend: BackendManager, *, qr_image_size: int):
        self._codec = codec
        self._backend = backend
        self._qr_image_size = int(qr_image_size)

    @property
    def current(self) -> Optional[TenantBootstrapPayload]:
        return self._backend.current_payload

    def configure(self, *, backend_config_json: str, company_name: str, tenant_project_id: str) -> bool:
        """Admin setup on a fresh install: bind this device to its own tenant."""
        if self._backend.current_payload is not None:
            raise AuthorizationError("Tenant already configured; only an admin can change it")
        return self._apply_new(backend_config_json, company_name, tenant_project_id)

    def reconfigure(self, *, current: User, backend_config_json: str, company_name: str, tenant_project_id: str) -> bool:
        if not current.is_admin:
            raise AuthorizationError("Admin only")
        return self._apply_new(backend_config_json, company_name, tenant_project_id)

    def _apply_new(self, backend_config_json: str, company_name: str, tenant_project_id: str) -> bool:
        # Round-trip through the codec so only shareable configs get stored.
        token = self._codec.encode(backend_config_json, company_name, tenant_project_id)
        return self._backend.apply(self._codec.decode(token))

    def generate_qr_token(self, *, current: User) -> str:
        if not current.is_admin:
            raise AuthorizationError("Admin only")
        payload = self._backend.current_payload
        if payload is None:
            raise ValidationError("Error: Config not found.")
        return self._codec.encode(payload.backend_config_json, payload.company_name, payload.tenant_project_id)

    def generate_qr_png(self, *, current: User) -> bytes:
        return render_qr_png(self.generate_qr_token(current=current), min_size=self._qr_image_size)

    def scan(self, token: str, *, current: Optional[User] = None) -> ScanResult:
        """Employee side: decode a scanned code and bind to its tenant.

        Nothing is stored unless the whole payload decodes and validates.
        Once a tenant is bound, only an admin may switch to a different one;
        rescanning the bound tenant is always accepted.
        """
        if not token or not token.strip():
            raise ValidationError("QR code is empty")
        try:
            payload = self._codec.decode(token)
        except TenantSetupError as e:
            logger.warning("Rejected tenant QR (%s): %s", e.code, e)
            raise

        bound = self._backend.current_payload
        if bound is not None and not bound.same_tenant_config(payload):
            if current is None or not current.is_admin:
                logger.warning("Rejected switch from tenant %s to %s", bound.tenant_project_id, payload.tenant_project_id)
                raise AuthorizationError("Tenant already configured; only an admin can change it")

        changed = self._backend.apply(payload)
        return ScanResult(payload=payload, changed=changed)

    def scan_image(self, image_bytes: bytes, *, current: Optional[User] = None) -> ScanResult:
        return self.scan(decode_qr_image(image_bytes), current=current)
