"""
Logger configuration.

Single stdout handler whose records carry the request correlation id and
the farmer id bound by the chat pipeline.

Dependencies: logging (stdlib), agribot.observability.correlation
System role: Centralized logging configuration
"""

import logging
import sys

from agribot.observability.correlation import get_correlation_id, get_user_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s user=%(user_id)s] %(message)s"

NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "sqlalchemy.engine",
    "google_genai",
    "langchain_google_genai",
)


class RequestContextFilter(logging.Filter):
    """Attach correlation id and farmer id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        record.user_id = get_user_id()
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Install the AgriBot handler on the root logger.

    Replaces existing root handlers, so calling it twice is harmless.

    Args:
        level: Root log level name
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
