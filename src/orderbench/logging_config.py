import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once, from `LOG_LEVEL` unless a level is given."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    if os.getenv("SQL_ECHO", "").lower() in ("1", "true", "yes"):
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
