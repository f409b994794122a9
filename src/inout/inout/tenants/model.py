from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from ..core.exceptions import InvalidBackendConfig, MalformedPayload


@dataclass(frozen=True)
class BackendOptions:
    """Minimum settings needed to bootstrap a tenant's backend client."""

    application_id: str
    api_key: str
    project_id: str
    storage_bucket: str


def parse_backend_options(config_json: str) -> BackendOptions:
    """Read client options from a google-services style JSON document.

    Layout: ``project_info.{project_id, storage_bucket}`` and the first client's
    ``client_info.mobilesdk_app_id`` and ``api_key[0].current_key``.
    """
    try:
        root = json.loads(config_json)
        project_info = root["project_info"]
        client = root["client"][0]
        options = BackendOptions(
            application_id=client["client_info"]["mobilesdk_app_id"],
            api_key=client["api_key"][0]["current_key"],
            project_id=project_info["project_id"],
            storage_bucket=project_info["storage_bucket"],
        )
    except (TypeError, ValueError, KeyError, IndexError) as e:
        raise InvalidBackendConfig(f"Backend configuration is incomplete or not JSON: {e}") from e

    for name, value in vars(options).items():
        if not isinstance(value, str) or not value.strip():
            raise InvalidBackendConfig(f"Backend configuration field '{name}' is empty")
    return options


@dataclass(frozen=True)
class TenantBootstrapPayload:
    backend_config_json: str
    company_name: str
    tenant_project_id: str
    timestamp: int

    def same_tenant_config(self, other: "TenantBootstrapPayload") -> bool:
        """Equal configuration, ignoring when the QR was generated."""
        return (
            json.loads(self.backend_config_json) == json.loads(other.backend_config_json)
            and self.company_name == other.company_name
            and self.tenant_project_id == other.tenant_project_id
        )


def payload_to_dict(payload: TenantBootstrapPayload) -> dict[str, Any]:
    return {
        "backendConfig": payload.backend_config_json,
        "companyName": payload.company_name,
        "projectId": payload.tenant_project_id,
        "timestamp": payload.timestamp,
    }


def payload_from_dict(data: Any) -> TenantBootstrapPayload:
    if not isinstance(data, Mapping):
        raise MalformedPayload("Payload is not an object")

    missing = [k for k in ("backendConfig", "companyName", "projectId") if k not in data]
    if missing:
        raise MalformedPayload(f"Payload is missing {', '.join(missing)}")

    backend_config = data["backendConfig"]
    company_name = data["companyName"]
    project_id = data["projectId"]
    timestamp = data.get("timestamp", 0)
    if not all(isinstance(v, str) for v in (backend_config, company_name, project_id)):
        raise MalformedPayload("Payload fields must be strings")
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise MalformedPayload("Payload timestamp must be an integer")

    return TenantBootstrapPayload(
        backend_config_json=backend_config,
        company_name=company_name,
        tenant_project_id=project_id,
        timestamp=timestamp,
    )
