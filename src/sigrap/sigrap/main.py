from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.http import register_error_handlers
from .common.logging_utils import configure_logging
from .core.constants import API_PREFIX, DEFAULT_LOG_LEVEL
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .container import Container, build_container
from .sales.controller import register as register_sales
from .sale_returns.controller import register as register_sale_returns

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger = configure_logging(str(getattr(settings, "LOG_LEVEL", DEFAULT_LOG_LEVEL)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(db_config=db_config)

    register_error_handlers(app)
    register_sales(app, container)
    register_sale_returns(app, container)

    @app.route(f"{API_PREFIX}/status", methods=["GET"], endpoint="status")
    def status():
        return jsonify({"status": "UP"})

    return app
