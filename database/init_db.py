import logging

from config.database import init_db
from config.log_config import configure_logging

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    configure_logging()
    init_db()
    logger.info("Database initialized")
