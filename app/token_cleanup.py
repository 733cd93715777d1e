"""
CLI entrypoint for sweeping expired password-reset tokens. Run from cron, e.g.:

  python -m app.token_cleanup

Or hourly: 0 * * * * cd /path/to/app && .venv/bin/python -m app.token_cleanup
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory
from app.services.password_reset import delete_expired_tokens

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete every reset token past its expiry."""
    settings = get_settings()
    db = build_session_factory(build_engine(settings.DATABASE_URL))()
    try:
        deleted = delete_expired_tokens(db)
        logger.info("Token cleanup completed: tokens_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Token cleanup job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
