import logging

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

logger = logging.getLogger(__name__)


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)
logger.info(
    "Rate limiter storage=%s enabled=%s", settings.RATE_LIMIT_STORAGE_URI, settings.RATE_LIMIT_ENABLED
)

RATE_LIMITS = {
    # Report endpoints scan the whole active catalog on every call
    "reports": settings.RATE_LIMIT_REPORTS,
}

