"""Load the demo catalogue from database/seed.sql (run init_db.py first)."""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module  # noqa: E402
from src.sigrap.sigrap.common.logging_utils import configure_logging  # noqa: E402
from src.sigrap.sigrap.database.bootstrap import apply_seed_sql, describe_target  # noqa: E402


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    logger.info("Seed data loaded into %s", describe_target(db_config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
