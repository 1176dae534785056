import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from app.core.config import settings
from app.core.exceptions import CatalogException

logger = logging.getLogger(__name__)

# Probe endpoints are hit constantly and carry no useful traces
_UNSAMPLED_PATHS = frozenset({"/healthz", "/live", "/metrics"})

_initialized = False


def _before_send(event, hint):
    """Drop client-side catalog errors (not found, validation, conflicts)."""
    exc_info = hint.get("exc_info")
    if exc_info:
        exc = exc_info[1]
        if isinstance(exc, CatalogException) and exc.status_code < 500:
            return None
    return event


def _traces_sampler(sampling_context) -> float:
    scope = sampling_context.get("asgi_scope") or {}
    if scope.get("path") in _UNSAMPLED_PATHS:
        return 0.0
    return 0.1


def init_monitoring() -> None:
    global _initialized
    if _initialized:
        return
    dsn = settings.SENTRY_DSN
    if dsn:
        try:
            sentry_sdk.init(
                dsn=dsn,
                integrations=[FastApiIntegration()],
                traces_sampler=_traces_sampler,
                before_send=_before_send,
                environment=settings.ENV,
                release=f"catalog-backend@{settings.ENV}",
            )
            logger.info("Sentry initialized env=%s", settings.ENV)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to init Sentry: %s", exc)
    _initialized = True
