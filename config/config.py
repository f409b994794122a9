import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "inout-dev-secret"

    # Key material for the company QR payload and the on-device tenant store
    QR_SECRET = os.environ.get("QR_SECRET", "inout-qr-secret")
    TENANT_STORAGE_SECRET = os.environ.get("TENANT_STORAGE_SECRET", "inout-storage-secret")
    TENANT_CONFIG_PATH = os.environ.get("TENANT_CONFIG_PATH", str(BASE_DIR / "instance" / "tenant_config.bin"))

    # memory | mysql
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "memory").lower()

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "inout_db")

    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))

    QR_IMAGE_SIZE = int(os.environ.get("QR_IMAGE_SIZE", "512"))
    DEFAULT_RADIUS_METERS = float(os.environ.get("DEFAULT_RADIUS_METERS", "100"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}
