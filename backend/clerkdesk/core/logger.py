# clerkdesk/core/logger.py
"""
Shared application logger
"""
import logging

from clerkdesk.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.basicConfig(
    level=getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO),
    format=LOG_FORMAT,
)

logger = logging.getLogger(settings.APP_NAME.lower())
