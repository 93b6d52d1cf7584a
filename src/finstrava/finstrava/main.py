from __future__ import annotations

import importlib
import logging
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .logging_config import setup_logging
from .catalog.controller import register as register_catalog
from .companies.controller import register as register_companies
from .contracts.controller import register as register_contracts
from .cron.controller import register as register_cron
from .customers.controller import register as register_customers
from .dashboard.controller import register as register_dashboard
from .hr.controller import register as register_hr
from .payroll.controller import register as register_payroll
from .transactions.controller import register as register_transactions

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app.

    ``container`` and ``config`` let tests swap in fake repositories and
    override settings without touching the environment.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["CRON_SECRET"] = getattr(settings, "CRON_SECRET", "")
    app.config["LOG_LEVEL"] = getattr(settings, "LOG_LEVEL", "INFO")
    if config:
        app.config.update(config)

    setup_logging(app.config["LOG_LEVEL"])
    if not app.config["CRON_SECRET"]:
        logger.warning("CRON_SECRET is not set; the cron endpoint accepts any caller")

    if container is None:
        container = build_container(db_config=db_config)
        logger.info("settings=%s db=%s", settings_module, container.conn.label)

    register_companies(app, container)
    register_customers(app, container)
    register_catalog(app, container)
    register_contracts(app, container)
    register_cron(app, container)
    register_transactions(app, container)
    register_hr(app, container)
    register_payroll(app, container)
    register_dashboard(app, container)

    return app
