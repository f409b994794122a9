import os
import tempfile

from .config import DB_CONFIG  # noqa: F401

SECRET_KEY = "test-secret"

QR_SECRET = "test-qr-secret"
TENANT_STORAGE_SECRET = "test-storage-secret"
TENANT_CONFIG_PATH = os.path.join(tempfile.gettempdir(), "inout-test", "tenant_config.bin")

STORE_BACKEND = "memory"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

QR_IMAGE_SIZE = 512
DEFAULT_RADIUS_METERS = 100.0
