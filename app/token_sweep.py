"""
CLI entrypoint for the refresh-token sweep. Run from cron, e.g.:

  python -m app.token_sweep

Or hourly: 0 * * * * cd /path/to/portcullis && .venv/bin/python -m app.token_sweep
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.token_sweep import run_token_sweep

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run the sweep: delete refresh tokens that are expired or revoked."""
    settings = get_settings()
    db = SessionLocal()
    try:
        tokens_deleted = run_token_sweep(db, settings)
        logger.info("Token sweep completed: tokens_deleted=%s", tokens_deleted)
        return 0
    except Exception as e:
        logger.exception("Token sweep failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
