import os

from .config import Config, DB_CONFIG  # noqa: F401

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

QR_SECRET = os.getenv("QR_SECRET", "please-set-QR_SECRET")
TENANT_STORAGE_SECRET = os.getenv("TENANT_STORAGE_SECRET", "please-set-TENANT_STORAGE_SECRET")
TENANT_CONFIG_PATH = Config.TENANT_CONFIG_PATH

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql").lower()

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

AUTO_INIT_DB = Config.AUTO_INIT_DB

QR_IMAGE_SIZE = Config.QR_IMAGE_SIZE
DEFAULT_RADIUS_METERS = Config.DEFAULT_RADIUS_METERS
