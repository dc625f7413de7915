"""structlog configuration for cdpgen.

Library modules log through :mod:`logging`; services log through structlog.
Both end up in one stderr handler whose formatter runs the structlog chain,
so a ``--log-json`` run emits one JSON object per record whatever its
origin. Without ``--verbose`` only warnings get through.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Third-party loggers that follow --verbose, and those that never go below WARNING.
_VERBOSE_LIBRARIES = ("httpx",)
_QUIET_LIBRARIES = ("httpcore",)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(
    processors: list[structlog.types.Processor], *, log_json: bool
) -> logging.Handler:
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib records to stderr.

    Safe to call more than once; the root handler is replaced, not stacked.

    Args:
        verbose: Lower ``cdpgen`` and ``httpx`` loggers to DEBUG.
        log_json: One JSON object per line instead of console output.
    """
    processors = _shared_processors()
    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(processors, log_json=log_json))
    root.setLevel(logging.WARNING)

    level = logging.DEBUG if verbose else logging.WARNING
    for name in ("cdpgen", *_VERBOSE_LIBRARIES):
        logging.getLogger(name).setLevel(level)
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
