import logging
import os
import sys

LOGGER_NAME = "authenticator"
LOG_LEVEL_ENV = "AUTHENTICATOR_LOG_LEVEL"


def _build_logger():
    logger = logging.getLogger(LOGGER_NAME)

    if logger.handlers:
        return logger

    # Diagnostics are warnings and errors; per-request detail is DEBUG
    logger.setLevel(os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s %(message)s"
    ))
    logger.addHandler(handler)

    return logger


log = _build_logger()


def log_invalid(name: str, owner: str = None) -> None:
    """Log a diagnostic for an input that was missing, zero or malformed."""
    if owner:
        log.error("[%s] %s is invalid or missing", owner, name)
    else:
        log.error("%s is invalid or missing", name)
