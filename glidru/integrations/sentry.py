# =============================================================================
# Sentry error reporting for the GlidrU API
# =============================================================================
#
# Setup:
#   1. Create a Python project at sentry.io
#   2. Copy DSN to .env: SENTRY_DSN=https://...@sentry.io/...
#
# Usage:
#   init_sentry() is called at app startup (glidru/api/app.py).
#   Without a DSN every helper here falls back to plain logging.
#
# =============================================================================

from __future__ import annotations

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from glidru.config import Settings, get_settings
from glidru.core.errors import GlidrError

logger = logging.getLogger(__name__)


def init_sentry(settings: Settings | None = None) -> bool:
    """
    Start Sentry when a DSN is configured.

    Returns whether reporting is on.
    """
    settings = settings or get_settings()

    if not settings.sentry_dsn:
        logger.info("No SENTRY_DSN; 5xx errors are only logged")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,

        # Sample 10% of transactions in prod
        traces_sample_rate=0.1 if settings.is_production else 1.0,

        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],

        # Emails and IPs stay out of events unless set_user adds them
        send_default_pii=False,

        before_send=_filter_events,
        before_send_transaction=_filter_transactions,
    )

    logger.info(f"Sentry reporting to environment {settings.environment}")
    return True


def _is_enabled() -> bool:
    return sentry_sdk.get_client().is_active()


def _filter_events(event: dict, hint: dict) -> dict | None:
    """Filter out expected errors and scrub credentials."""
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]

        # Caller errors (400/401/403/404) are not bugs
        if isinstance(exc_value, GlidrError) and exc_value.status_code < 500:
            return None

    if "request" in event:
        headers = event["request"].get("headers", {})
        for key in list(headers.keys()):
            if key.lower() in ("authorization", "cookie"):
                headers[key] = "[Filtered]"

    return event


def _filter_transactions(event: dict, hint: dict) -> dict | None:
    """Drop health-check transactions."""
    transaction = event.get("transaction", "")
    if transaction.endswith("/health") or transaction == "health_check":
        return None
    return event


def capture_exception(error: BaseException, **context) -> str | None:
    """
    Report a server-side failure.

    Returns the event ID if captured, None otherwise. Callers log the
    error themselves.
    """
    if not _is_enabled():
        return None

    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)


def set_user(user_id: str, email: str | None = None) -> None:
    """Tag subsequent events with the authenticated uid."""
    if _is_enabled():
        sentry_sdk.set_user({"id": user_id, "email": email})
