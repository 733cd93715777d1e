"""
CLI entrypoint for seeding provinces and the default admin. Run once after migrations:

  python -m app.bootstrap
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory
from app.services.bootstrap import run_bootstrap

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    db = build_session_factory(build_engine(settings.DATABASE_URL, echo=settings.DEBUG))()
    try:
        provinces_created, admin_created = run_bootstrap(db, settings)
        logger.info(
            "Bootstrap completed: provinces_created=%s admin_created=%s",
            provinces_created,
            admin_created,
        )
        return 0
    except Exception as e:
        logger.exception("Bootstrap failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
