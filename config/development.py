import os

from .config import Config, DB_CONFIG  # noqa: F401

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

QR_SECRET = Config.QR_SECRET
TENANT_STORAGE_SECRET = Config.TENANT_STORAGE_SECRET
TENANT_CONFIG_PATH = Config.TENANT_CONFIG_PATH

STORE_BACKEND = Config.STORE_BACKEND

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

# If enabled, app creates the documents table on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

QR_IMAGE_SIZE = Config.QR_IMAGE_SIZE
DEFAULT_RADIUS_METERS = Config.DEFAULT_RADIUS_METERS
