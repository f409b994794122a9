from __future__ import annotations

import importlib
import logging
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .locations.controller import register as register_locations
from .tenants.controller import register as register_tenants
from .tenants.model import BackendOptions, TenantBootstrapPayload
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def load_settings(settings_module: Optional[str] = None) -> dict[str, Any]:
    module = importlib.import_module(settings_module or get_settings_module())
    return {name: getattr(module, name) for name in dir(module) if name.isupper()}


def create_app(config_overrides: Optional[dict[str, Any]] = None, *, settings_module: Optional[str] = None, **container_kwargs) -> Flask:
    load_dotenv(override=False)

    settings = load_settings(settings_module)
    settings.update(config_overrides or {})

    logging.basicConfig(
        level=getattr(logging, str(settings.get("LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config.update(settings)

    def on_rebind(options: BackendOptions, payload: TenantBootstrapPayload) -> None:
        app.config["TENANT_PROJECT_ID"] = options.project_id
        app.config["TENANT_COMPANY"] = payload.company_name
        logger.info("Backend bound to project %s (%s)", options.project_id, payload.company_name)

    container = build_container(settings=settings, on_rebind=on_rebind, **container_kwargs)
    container.backend_manager.initialize()
    app.extensions["inout"] = container

    logger.debug("settings=%s store=%s", settings_module or get_settings_module(), settings.get("STORE_BACKEND"))

    register_users(app, container)
    register_locations(app, container)
    register_attendance(app, container)
    register_tenants(app, container)

    return app
