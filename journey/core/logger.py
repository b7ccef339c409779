# core/logger.py
import logging

from journey.core.config import settings

# Application-wide logger, detached email tasks log through it too
logger = logging.getLogger("journey")
logger.setLevel(settings.LOG_LEVEL.upper())

# avoid adding multiple handlers if the module is reloaded
if not logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] %(message)s")
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
