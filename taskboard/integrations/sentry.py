# =============================================================================
# Error Reporting (Sentry)
# =============================================================================
#
# Enabled by setting SENTRY_DSN (environment or .env). Without it,
# init_sentry() returns False and the helpers below do nothing.
#
# Server errors are reported by the FastAPI/Starlette integrations;
# log records only become breadcrumbs. Domain errors under 500
# (validation, auth, denials, not found) are regular traffic and never
# reported. Credentials and request bodies are scrubbed from every event.
#
# =============================================================================

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from taskboard.config import get_settings
from taskboard.core.errors import TaskBoardError

logger = logging.getLogger(__name__)

SCRUBBED_HEADERS = ("authorization", "cookie")
# Transaction names are endpoint paths (transaction_style="endpoint")
UNTRACED_ENDPOINTS = ("taskboard.api.app.root", "taskboard.api.app.health_check")


def init_sentry() -> bool:
    """Configure the SDK at startup. False when no DSN is configured."""
    settings = get_settings()
    if not settings.sentry_dsn:
        logger.info("Error reporting disabled (no SENTRY_DSN)")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.is_production else 1.0,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            LoggingIntegration(level=logging.INFO, event_level=None),
        ],
        send_default_pii=False,
        before_send=_filter_events,
        before_send_transaction=_filter_transactions,
    )
    logger.info(f"Error reporting enabled ({settings.environment})")
    return True


def is_enabled() -> bool:
    return sentry_sdk.get_client().is_active()


def _filter_events(event: dict, hint: dict) -> dict | None:
    error = hint.get("exc_info", (None, None, None))[1]
    if isinstance(error, TaskBoardError) and error.status_code < 500:
        return None

    request = event.get("request")
    if request:
        headers = request.get("headers") or {}
        for name in list(headers):
            if name.lower() in SCRUBBED_HEADERS:
                headers[name] = "[Filtered]"
        # Bodies carry passwords and reset tokens
        if "data" in request:
            request["data"] = "[Filtered]"
    return event


def _filter_transactions(event: dict, hint: dict) -> dict | None:
    if event.get("transaction") in UNTRACED_ENDPOINTS:
        return None
    return event


def set_user(user_id: str) -> None:
    """Tag subsequent events with the authenticated caller."""
    if is_enabled():
        sentry_sdk.set_user({"id": user_id})
