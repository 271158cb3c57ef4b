"""
Structlog setup for the deck service.

Every event carries the service name and environment. Raw model output and
upstream error text end up in log fields (repair issues, refine fallbacks),
so long string values are clipped before rendering. Synthesis and render
runs get their own correlation id nested inside the request context.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, MutableMapping, Optional
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from deckwright.infra.config.settings import Settings

MAX_FIELD_CHARS = 2000

# HTTP client loggers of the model provider; one INFO line per completion call
PROVIDER_LOGGERS = ("openai", "httpx", "httpcore")


def clip_long_values(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    for key, value in event_dict.items():
        if isinstance(value, str) and len(value) > MAX_FIELD_CHARS:
            event_dict[key] = f"{value[:MAX_FIELD_CHARS]}... [{len(value)} chars]"
    return event_dict


def service_stamp(service: str, environment: str):
    """Processor adding ``service`` and ``environment`` unless already bound."""

    def _stamp(
        logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        event_dict.setdefault("service", service)
        event_dict.setdefault("environment", environment)
        return event_dict

    return _stamp


def setup_logging(settings: Optional["Settings"] = None) -> None:
    """Configure structlog and stdlib logging from settings.

    Args:
        settings: Application settings; the cached settings when omitted.
    """
    if settings is None:
        from deckwright.infra.config.settings import get_settings

        settings = get_settings()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)
    for name in PROVIDER_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if settings.log_format.lower() == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            service_stamp(settings.app_name, settings.environment),
            clip_long_values,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:  # type: ignore[name-defined]
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


def bind_context(**kwargs: Any) -> None:
    """Bind correlation fields (request_id, user_id, project_id) for this task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def operation_scope(kind: str, **fields: Any) -> Iterator[str]:
    """Bind ``<kind>_id`` plus ``fields`` until the block exits.

    Previously bound values are restored afterwards, so nested scopes and the
    surrounding request context survive.
    """
    scope_id = uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(**{f"{kind}_id": scope_id}, **fields):
        yield scope_id
