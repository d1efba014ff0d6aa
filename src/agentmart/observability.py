"""Logging and Sentry setup for the marketplace service."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, cast

import sentry_sdk
import structlog
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.httpx import HttpxIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.redis import RedisIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

DEFAULT_TRACES_SAMPLE_RATE = 0.2  # 20% of transactions in production
DEV_TRACES_SAMPLE_RATE = 1.0

SENSITIVE_HEADERS = ("authorization", "cookie", "apikey", "x-api-key")
SENSITIVE_EXTRA_KEYS = ("password", "token", "secret", "api_key", "apikey")
HEALTH_TRANSACTIONS = ("/health", "/readiness", "/liveness")


def configure_logging(
    service_name: str,
    log_level: int | str = logging.INFO,
    json_format: bool | None = None,
) -> structlog.stdlib.BoundLogger:
    """
    Configure stdlib logging and structlog to write through one handler.

    Args:
        service_name: Name of the service for log context
        log_level: Minimum log level, as a number or a level name
        json_format: Use JSON output (True) or console format (False).
                     If None, JSON is used everywhere except development.

    Returns:
        Configured structlog logger
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    if json_format is None:
        environment = os.environ.get("ENVIRONMENT", "development")
        json_format = environment != "development"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates on hot reload
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _add_sentry_breadcrumb,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return cast("structlog.stdlib.BoundLogger", structlog.get_logger(service_name))


def _add_sentry_breadcrumb(
    _logger: Any,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Record each structlog event as a Sentry breadcrumb."""
    standard_keys = {"event", "level", "timestamp", "logger"}
    extra_data = {k: v for k, v in event_dict.items() if k not in standard_keys}
    sentry_sdk.add_breadcrumb(
        message=str(event_dict.get("event", "")),
        category="log",
        level=event_dict.get("level", "info"),
        data=extra_data or None,
    )
    return event_dict


@dataclass
class SentryConfig:
    """Configuration for Sentry SDK initialization."""

    service_name: str
    dsn: str | None = None
    environment: str | None = None
    release: str | None = None
    traces_sample_rate: float | None = None
    enable_redis_tracing: bool = True


def scrub_event(event: dict[str, Any]) -> dict[str, Any]:
    """Mask credentials in request headers and extra context."""
    request = event.get("request")
    if isinstance(request, dict):
        headers = request.get("headers")
        if isinstance(headers, dict):
            for key in list(headers):
                if key.lower() in SENSITIVE_HEADERS:
                    headers[key] = "[Filtered]"

    extra = event.get("extra")
    if isinstance(extra, dict):
        for key in list(extra):
            if any(sensitive in key.lower() for sensitive in SENSITIVE_EXTRA_KEYS):
                extra[key] = "[Filtered]"
    return event


def drop_health_transaction(event: dict[str, Any]) -> dict[str, Any] | None:
    """Drop transactions for health probes."""
    if event.get("transaction", "") in HEALTH_TRANSACTIONS:
        return None
    return event


def _build_integrations(cfg: SentryConfig) -> list[Any]:
    integrations: list[Any] = [
        StarletteIntegration(transaction_style="endpoint"),
        FastApiIntegration(transaction_style="endpoint"),
        HttpxIntegration(),
        AsyncioIntegration(),
        LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
    ]
    if cfg.enable_redis_tracing:
        integrations.append(RedisIntegration())
    return integrations


def init_sentry(service_name: str, config: SentryConfig | None = None) -> bool:
    """
    Initialize Sentry SDK for the service.

    Returns:
        True if Sentry was initialized, False if no DSN was provided
    """
    cfg = config or SentryConfig(service_name=service_name)
    effective_dsn = cfg.dsn or os.environ.get("SENTRY_DSN")
    if not effective_dsn:
        return False

    effective_env = cfg.environment or os.environ.get("ENVIRONMENT", "development")
    traces_rate = cfg.traces_sample_rate
    if traces_rate is None:
        traces_rate = (
            DEFAULT_TRACES_SAMPLE_RATE if effective_env == "production" else DEV_TRACES_SAMPLE_RATE
        )

    sentry_sdk.init(
        dsn=effective_dsn,
        environment=effective_env,
        release=cfg.release or f"{service_name}@{os.environ.get('VERSION', '0.1.0')}",
        traces_sample_rate=traces_rate,
        integrations=_build_integrations(cfg),
        before_send=lambda event, _hint: scrub_event(event),
        before_send_transaction=lambda event, _hint: drop_health_transaction(event),
        send_default_pii=False,
        attach_stacktrace=True,
        server_name=service_name,
        ignore_errors=[
            "ConnectionRefusedError",
            "asyncio.CancelledError",
            "KeyboardInterrupt",
            "httpx.ConnectError",
            "httpx.ReadTimeout",
        ],
    )
    sentry_sdk.set_tag("service", service_name)
    return True
