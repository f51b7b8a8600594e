"""Create the configured database and apply database/schema.sql.

Usage: ``python scripts/init_db.py [--seed]``. Settings come from
``APP_ENV`` like the app itself.
"""
from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module  # noqa: E402
from src.sigrap.sigrap.common.logging_utils import configure_logging  # noqa: E402
from src.sigrap.sigrap.database.bootstrap import (  # noqa: E402
    apply_schema,
    apply_seed_sql,
    describe_target,
    list_tables,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", action="store_true", help="also load database/seed.sql")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    if args.seed:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    tables = list_tables(db_config)
    logger.info("Schema ready on %s: %s", describe_target(db_config), ", ".join(sorted(tables)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
