"""Logging setup for post-dispatch.

structlog renders every event, including records emitted through stdlib
`logging` by httpx. Production runs write one JSON object per line;
interactive runs get the console renderer, colored only on a TTY.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Third-party loggers that would otherwise log once per request
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every event with the application name."""
    event_dict["app"] = "post-dispatch"
    return event_dict


def _build_renderer(environment: str) -> tuple[Processor, list[Processor]]:
    """Pick the final renderer and any processors it needs upstream."""
    if environment.lower() == "production":
        return structlog.processors.JSONRenderer(), [structlog.processors.format_exc_info]
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()), []


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: "production" selects JSON output; anything else is console

    Safe to call more than once: the root handler is replaced, not added.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    renderer, extra_processors = _build_renderer(environment)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        *extra_processors,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).debug(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer=type(renderer).__name__,
    )
