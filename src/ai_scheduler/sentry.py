"""Sentry reporting for CLI runs.

The CLI initializes once per command. The chat handler leaves breadcrumbs
unconditionally; every helper is a no-op when no DSN is configured.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from ai_scheduler.config import settings

if TYPE_CHECKING:
    from sentry_sdk._types import Event, Hint

logger = logging.getLogger(__name__)

# Module state
_initialized = False


def init_sentry(
    dsn: str | None = None,
    environment: str | None = None,
    release: str | None = None,
    traces_sample_rate: float = 0.0,
    debug: bool = False,
) -> bool:
    """Start reporting when a DSN is configured. Returns whether it did."""
    global _initialized

    if _initialized:
        logger.debug("Sentry already initialized")
        return True

    if dsn is None:
        dsn = settings.sentry_dsn

    if not dsn:
        logger.info("No SENTRY_DSN configured, error tracking disabled")
        return False

    environment = environment or settings.sentry_environment

    if release is None:
        from importlib.metadata import PackageNotFoundError, version

        try:
            release = f"ai-scheduler@{version('ai-scheduler')}"
        except PackageNotFoundError:
            release = "ai-scheduler@unknown"

    logging_integration = LoggingIntegration(
        level=logging.INFO,  # Breadcrumbs
        event_level=logging.ERROR,  # Events
    )

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        debug=debug,
        integrations=[logging_integration],
        send_default_pii=False,
        attach_stacktrace=True,
        before_send=_before_send,
    )

    _initialized = True
    logger.info(f"Sentry initialized: environment={environment}, release={release}")
    return True


def _before_send(event: Event, hint: Hint) -> Event | None:
    """Drop user-input noise and scrub secrets before an event leaves the process."""
    if "exc_info" in hint:
        exc_type, _, _ = hint["exc_info"]

        # Interrupted chat sessions
        if exc_type.__name__ in ("KeyboardInterrupt", "EOFError"):
            return None

    if "extra" in event:
        _scrub_dict(cast(dict[str, Any], event["extra"]))

    if "breadcrumbs" in event:
        breadcrumbs = cast(dict[str, Any], event["breadcrumbs"])
        for breadcrumb in breadcrumbs.get("values", []):
            if "data" in breadcrumb:
                _scrub_dict(breadcrumb["data"])

    return event


def _scrub_dict(data: dict[str, Any]) -> None:
    """Scrub sensitive keys from a dictionary in-place."""
    sensitive_keys = {
        "token",
        "api_key",
        "secret",
        "password",
        "authorization",
        "sentry_dsn",
        "notes",
    }

    for key in list(data.keys()):
        if key.lower() in sensitive_keys:
            data[key] = "[REDACTED]"
        elif isinstance(data[key], dict):
            _scrub_dict(data[key])


def set_tag(key: str, value: str) -> None:
    """Set a searchable tag on the current Sentry scope."""
    if not _initialized:
        return

    sentry_sdk.set_tag(key, value)


def add_breadcrumb(
    message: str,
    category: str = "default",
    level: str = "info",
    data: dict[str, Any] | None = None,
) -> None:
    """Record a chat or store step to attach to the next captured error."""
    if not _initialized:
        return

    sentry_sdk.add_breadcrumb(
        message=message,
        category=category,
        level=level,
        data=data or {},
    )


def capture_exception(exception: BaseException | None = None) -> str | None:
    """Report ``exception``; returns the event id, or None when disabled."""
    if not _initialized:
        return None

    return sentry_sdk.capture_exception(exception)


def flush(timeout: float = 2.0) -> None:
    """Flush pending Sentry events before shutdown."""
    if not _initialized:
        return

    sentry_sdk.flush(timeout=timeout)


def is_enabled() -> bool:
    return _initialized
