from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .api.transport import Transport
from .common.log import configure_logging
from .config import get_settings_module
from .container import build_container
from .web.auth_controller import register as register_auth
from .web.dashboard_controller import register as register_dashboard
from .web.listing_controller import register as register_listing
from .web.templating import register as register_templating

logger = logging.getLogger(__name__)


def create_app(*, transport: Optional[Transport] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="templates", static_folder="static")

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["NOTIFICATION_SECONDS"] = float(getattr(settings, "NOTIFICATION_SECONDS", 4.0))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("settings=%s api=%s", settings_module, getattr(settings, "API_BASE_URL"))

    container = build_container(
        api_base_url=getattr(settings, "API_BASE_URL"),
        storage_base_url=getattr(settings, "STORAGE_BASE_URL"),
        request_timeout=float(getattr(settings, "REQUEST_TIMEOUT_SECONDS", 20.0)),
        action_timeout=float(getattr(settings, "ACTION_TIMEOUT_SECONDS", 15.0)),
        notification_seconds=app.config["NOTIFICATION_SECONDS"],
        transport=transport,
    )
    app.extensions["hr_portal"] = container

    register_templating(app, container)
    register_auth(app, container)
    register_dashboard(app, container)
    register_listing(app, container)

    return app
