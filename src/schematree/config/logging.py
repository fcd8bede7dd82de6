"""structlog configuration for schematree.

Library modules log through stdlib ``logging.getLogger(__name__)``; this
module routes those records (and native structlog loggers) through one
structlog formatter on stderr:

- Human (default): console renderer, colored when stderr is a terminal
- JSON (``--log-json``): one JSON object per line

Commands bind the reflection document being processed with
:func:`bind_document`, so every record emitted while it is in use carries a
``document`` field.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "schematree"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog and the stdlib handler on the root logger.

    Args:
        verbose: DEBUG for the ``schematree`` logger; WARNING otherwise.
            Third-party loggers always stay at WARNING.
        log_json: Use the JSON renderer instead of the console renderer.
    """
    shared = _shared_processors()
    structlog.contextvars.clear_contextvars()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


def bind_document(path: str) -> None:
    """Attach the reflection document *path* to subsequent log records."""
    structlog.contextvars.bind_contextvars(document=path)
