# explorer/utils/logger.py
import logging
import sys
from explorer.utils.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logger(name: str, level: str) -> logging.Logger:
    """Sets up a stdout logger; an unknown level name falls back to INFO."""
    configured = logging.getLogger(name)
    configured.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Reloads re-run this module, so drop the handler added last time.
    configured.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    configured.addHandler(handler)

    configured.propagate = False
    return configured


logger = configure_logger("explorer", settings.log_level)
