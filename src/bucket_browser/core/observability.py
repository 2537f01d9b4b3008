"""Logging and tracing for bucket-browser.

Logs are JSON lines on stderr so CLI output on stdout stays clean. Credential
material never reaches a log line: secret fields are masked outright, and the
signature and session token of any presigned URL embedded in a string field
are masked in place.
"""

import logging
import re
import sys
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import Settings, settings

REDACTED = "***"
SECRET_FIELDS = frozenset({"secret_access_key", "session_token", "web_identity_token"})
SIGNED_QUERY_PARAM = re.compile(
    r"((?:X-Amz-Signature|X-Amz-Security-Token|Signature|x-amz-security-token)=)[^&\s\"']+"
)


def redact_secrets(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Mask credential fields and presigned URL signatures."""
    for field, value in event_dict.items():
        if field in SECRET_FIELDS:
            event_dict[field] = REDACTED
        elif isinstance(value, str) and "=" in value:
            event_dict[field] = SIGNED_QUERY_PARAM.sub(rf"\1{REDACTED}", value)
    return event_dict


def setup_logging(config: Settings) -> None:
    """Route structlog through stdlib logging at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, config.log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_tracing(config: Settings) -> bool:
    """Install a console-exporting tracer provider when tracing is enabled.

    Returns:
        True if a provider was installed
    """
    if not config.otel_enabled:
        return False

    provider = TracerProvider(
        resource=Resource.create({"service.name": config.otel_service_name})
    )
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    return True


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def get_tracer(name: str) -> trace.Tracer:
    """Tracer for storage operations; a no-op tracer unless tracing is enabled."""
    return trace.get_tracer(name)


setup_logging(settings)
setup_tracing(settings)
