"""Logging setup for enginectl: structlog rendering over stdlib loggers.

Domain and service modules log through ``logging.getLogger(__name__)``.
A single stderr handler renders every record through structlog, either
as key/value console lines or, with ``--log-json``, one JSON object per
line.  stdout stays reserved for command results.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "enginectl"


def _shared_processors() -> list[structlog.types.Processor]:
    """Processors applied to both structlog and stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _stderr_handler(log_json: bool) -> logging.Handler:
    """Build the one handler that formats records for stderr."""
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(log_json),
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all log output to stderr.

    Third-party loggers stay at WARNING; the ``enginectl`` logger drops
    to DEBUG with *verbose*.  Calling this again replaces the previous
    handler rather than adding a second one.
    """
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
