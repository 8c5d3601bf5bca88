"""Logging setup for the API, UI and scripts."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the package logger. Safe to call twice."""
    global _configured
    logger = logging.getLogger("workshop_pricing")
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    _configured = True