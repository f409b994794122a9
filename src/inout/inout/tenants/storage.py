from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from ..core.exceptions import DecryptionFailed, MalformedPayload
from .codec import derive_fernet_key
from .model import TenantBootstrapPayload, payload_from_dict, payload_to_dict

logger = logging.getLogger(__name__)

_STORAGE_SALT = b"inout.tenant-storage.v1"


class EncryptedTenantConfigStore:
    """Tenant config persisted on this device, encrypted at rest."""

    def __init__(self, path: str | Path, secret: str):
        self._path = Path(path)
        self._fernet = Fernet(derive_fernet_key(secret, salt=_STORAGE_SALT))

    @property
    def path(self) -> Path:
        return self._path

    def save(self, payload: TenantBootstrapPayload) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        token = self._fernet.encrypt(json.dumps(payload_to_dict(payload)).encode("utf-8"))
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_bytes(token)
        os.replace(tmp, self._path)

    def load(self) -> Optional[TenantBootstrapPayload]:
        if not self._path.exists():
            return None
        try:
            plaintext = self._fernet.decrypt(self._path.read_bytes())
        except InvalidToken as e:
            raise DecryptionFailed(f"Stored tenant config at {self._path} cannot be decrypted") from e
        try:
            return payload_from_dict(json.loads(plaintext.decode("utf-8")))
        except ValueError as e:
            raise MalformedPayload(f"Stored tenant config at {self._path} is corrupt") from e

    def clear(self) -> bool:
        try:
            self._path.unlink()
            return True
        except FileNotFoundError:
            return False
