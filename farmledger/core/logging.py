import logging

from farmledger.core.config import settings

LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(funcName)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

logger = logging.getLogger(settings.LOG_NAME)
logger.setLevel(settings.LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

# Avoid duplicate logs through the root logger
logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Child logger of the application logger, e.g. ``farmledger.loans``."""
    return logger.getChild(name)
