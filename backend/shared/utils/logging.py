"""
Structured logging for the fixture enricher.
structlog events go through the stdlib root logger, so library logs (playwright,
httpx) share one stdout stream and one renderer.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from shared.config import Environment, Settings, get_settings

# Libraries that log per request or per protocol message at INFO/DEBUG
QUIET_LOGGERS = ("playwright", "httpx", "httpcore", "asyncio")


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(settings: Settings) -> structlog.types.Processor:
    # Colour for an operator watching a dev run; one JSON object per line otherwise
    if settings.environment == Environment.DEV:
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def setup_logging(service_name: str, output_path: Optional[str] = None) -> None:
    """
    Route structlog and stdlib logging to stdout and bind the run's static context.

    Args:
        service_name: Logged as `service` on every event.
        output_path: The output log this run appends to, bound as `output` when given.
    """
    settings = get_settings()
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name, instance_id=settings.instance_id)
    if output_path:
        structlog.contextvars.bind_contextvars(output=output_path)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
