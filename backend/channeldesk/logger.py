"""Logging configuration for the API and the dashboard client."""

import logging
import sys

from channeldesk.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("googleapiclient.discovery_cache", "httpx", "httpcore")

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format=LOG_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],  # serverless runtimes capture stdout
)

for _name in QUIET_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger.

    Production logs at INFO; everything else at DEBUG so local runs show
    token and YouTube request details.
    """
    logger = logging.getLogger(f"channeldesk.{name}")
    logger.setLevel(logging.INFO if settings.is_production else logging.DEBUG)
    return logger


app_logger = get_logger("app")
db_logger = get_logger("database")
redis_logger = get_logger("redis")
auth_logger = get_logger("auth")
api_logger = get_logger("api")
youtube_logger = get_logger("youtube")
dashboard_logger = get_logger("dashboard")
