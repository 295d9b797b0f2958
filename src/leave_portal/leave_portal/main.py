from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask

from .blackouts.controller import register as register_blackouts
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.policy import LeavePolicy
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .leaves.controller import register as register_leaves

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _load_settings() -> Any:
    from config import get_settings_module

    return importlib.import_module(get_settings_module())


def create_app(settings: Optional[Any] = None, *, container: Optional[Container] = None) -> Flask:
    """Application factory.

    ``settings`` defaults to the module picked by ``APP_ENV``; passing a
    ready ``container`` skips all database wiring (used by the tests).
    """

    load_dotenv(override=False)
    if settings is None:
        settings = _load_settings()

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY", None)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.json.sort_keys = False

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "leave-portal db=%s@%s:%s/%s",
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
            policy=LeavePolicy.from_settings(settings),
        )

    app.extensions["leave_portal"] = container

    register_error_handlers(app)
    register_leaves(app, container)
    register_blackouts(app, container)

    return app
