"""structlog configuration for cinegate.

``main.py`` calls :func:`configure_logging` once with ``LOG_LEVEL`` and
``APP_ENV`` from :class:`~src.config.settings.Settings`.  Production gets
one JSON object per line; anything else gets the coloured console view.

Every event carries ``service`` and, while a request is being handled,
the ``request_id`` / ``path`` bound by
:class:`~src.api.middleware.RequestLoggingMiddleware`.  Records from
stdlib loggers (uvicorn, httpx, redis) go through the same pipeline; the
per-request chatter of httpx and the redis pool is held at WARNING.
"""

import logging
import sys
from typing import Any

import structlog
from structlog._config import BoundLoggerLazyProxy
from structlog.types import EventDict, Processor

SERVICE_NAME = "cinegate"

QUIET_LOGGERS = ("httpx", "httpcore", "redis")

_PRODUCTION = "production"


def _stamp_service(service: str) -> Processor:
    def _processor(_logger: Any, _method: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return _processor


def _renderer_for(app_env: str) -> Processor:
    if app_env == _PRODUCTION:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(
    log_level: str = "INFO",
    app_env: str = "development",
    service: str = SERVICE_NAME,
) -> None:
    """Install the structlog pipeline and route stdlib logging through it.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
            Unknown names fall back to INFO.
        app_env: ``"production"`` selects JSON output.
        service: Value of the ``service`` key on every event.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _stamp_service(service),
        structlog.processors.add_log_level,
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if app_env == _PRODUCTION:
        pre_chain.append(structlog.processors.dict_tracebacks)
    renderer = _renderer_for(app_env)

    structlog.configure(
        processors=[*pre_chain, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[structlog.stdlib.add_logger_name, *pre_chain],
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger whose events carry ``logger=<name>``.

    Configures development defaults on first use so modules imported
    outside ``main.py`` (tests, REPL) still log.
    """
    if not structlog.is_configured():
        configure_logging()
    return BoundLoggerLazyProxy(
        None, initial_values={"logger": name}, logger_factory_args=()
    )
