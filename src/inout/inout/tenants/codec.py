"""Encrypted tenant bootstrap payload carried by the company QR code.

Encryption keeps backend credentials from being read straight off a
photographed code. It is not access control: anyone holding a legitimately
shared code is meant to join the tenant.
"""
from __future__ import annotations

import base64
import json
import logging
from datetime import datetime
from typing import Callable, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..common.datetime_utils import epoch_millis, now_local
from ..common.validators import require_non_empty
from ..core.exceptions import DecryptionFailed, MalformedPayload
from .model import TenantBootstrapPayload, parse_backend_options, payload_from_dict, payload_to_dict

logger = logging.getLogger(__name__)

_KDF_SALT = b"inout.tenant-config.v1"
_KDF_ITERATIONS = 200_000


def derive_fernet_key(secret: str, *, salt: bytes = _KDF_SALT) -> bytes:
    """Turn a configured passphrase into a Fernet key."""
    kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=_KDF_ITERATIONS)
    return base64.urlsafe_b64encode(kdf.derive(secret.encode("utf-8")))


class TenantConfigCodec:
    def __init__(self, secret: str, *, clock: Callable[[], datetime] = now_local):
        self._fernet = Fernet(derive_fernet_key(require_non_empty(secret, "QR secret")))
        self._clock = clock

    def encode(self, backend_config_json: str, company_name: str, tenant_project_id: str, *, now: Optional[datetime] = None) -> str:
        """Admin side: validate, wrap, serialize and encrypt."""
        parse_backend_options(backend_config_json)
        payload = TenantBootstrapPayload(
            backend_config_json=backend_config_json,
            company_name=require_non_empty(company_name, "Company name"),
            tenant_project_id=require_non_empty(tenant_project_id, "Project ID"),
            timestamp=epoch_millis(now or self._clock()),
        )
        serialized = json.dumps(payload_to_dict(payload), separators=(",", ":"))
        return self._fernet.encrypt(serialized.encode("utf-8")).decode("ascii")

    def decode(self, token: str) -> TenantBootstrapPayload:
        """Employee side: decrypt, parse and validate a scanned payload."""
        try:
            plaintext = self._fernet.decrypt(token.strip().encode("ascii"))
        except (InvalidToken, AttributeError, UnicodeEncodeError) as e:
            raise DecryptionFailed("Invalid QR Code. Decryption failed.") from e

        try:
            data = json.loads(plaintext.decode("utf-8"))
        except ValueError as e:
            raise MalformedPayload("Invalid QR Data format.") from e

        payload = payload_from_dict(data)
        parse_backend_options(payload.backend_config_json)
        return payload
