from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..core.exceptions import TenantSetupError
from .model import BackendOptions, TenantBootstrapPayload, parse_backend_options
from .storage import EncryptedTenantConfigStore

logger = logging.getLogger(__name__)

RebindCallback = Callable[[BackendOptions, TenantBootstrapPayload], None]


class BackendManager:
    """Binds the document-store client to the tenant chosen at onboarding.

    The manager owns the stored tenant config; the actual client rebind is the
    ``on_rebind`` collaborator's job.
    """

    def __init__(self, storage: EncryptedTenantConfigStore, *, on_rebind: Optional[RebindCallback] = None):
        self._storage = storage
        self._on_rebind = on_rebind
        self._lock = threading.Lock()
        self._payload: Optional[TenantBootstrapPayload] = None
        self._options: Optional[BackendOptions] = None

    @property
    def current_payload(self) -> Optional[TenantBootstrapPayload]:
        return self._payload

    @property
    def current_options(self) -> Optional[BackendOptions]:
        return self._options

    @property
    def is_configured(self) -> bool:
        return self._options is not None

    def initialize(self) -> Optional[BackendOptions]:
        """Bind to the stored tenant, if any (called once at start-up)."""
        try:
            payload = self._storage.load()
        except TenantSetupError:
            logger.exception("Failed to read saved tenant config; waiting for setup")
            return None

        if payload is None:
            logger.info("No tenant config found. Waiting for setup.")
            return None

        with self._lock:
            self._bind(payload)
        return self._options

    def apply(self, payload: TenantBootstrapPayload) -> bool:
        """Persist and bind a decoded payload.

        Returns False without writing or rebinding when the stored config is
        already identical.
        """
        options = parse_backend_options(payload.backend_config_json)
        with self._lock:
            if self._payload is not None and self._payload.same_tenant_config(payload):
                logger.info("Tenant %s already configured; nothing to apply", payload.tenant_project_id)
                return False

            self._storage.save(payload)
            self._bind(payload, options)
        logger.info("New tenant configuration saved for %s (%s)", payload.company_name, payload.tenant_project_id)
        return True

    def reset(self) -> None:
        with self._lock:
            self._storage.clear()
            self._payload = None
            self._options = None

    def _bind(self, payload: TenantBootstrapPayload, options: Optional[BackendOptions] = None) -> None:
        options = options or parse_backend_options(payload.backend_config_json)
        if self._options is not None and self._options.application_id != options.application_id:
            logger.warning(
                "Rebinding backend from %s to %s", self._options.project_id, options.project_id
            )
        self._payload = payload
        self._options = options
        if self._on_rebind is not None:
            self._on_rebind(options, payload)
