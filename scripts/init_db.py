"""
Create the clinic schema and load the reference catalogs.

Safe to run repeatedly: tables are created only when absent and seed rows
only when their id is free.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from db.seed import create_schema, seed_reference_data  # noqa: E402
from db.session import session_scope  # noqa: E402

logger = logging.getLogger("init_db")


def main() -> int:
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        with session_scope() as db:
            create_schema(db)
            seeded = seed_reference_data(db)
    except (RuntimeError, SQLAlchemyError):
        logger.exception("Schema initialisation failed")
        return 1

    logger.info("Schema ready, %d reference row(s) inserted", seeded)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
