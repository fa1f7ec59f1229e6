"""structlog setup for zonectl.

Both structlog loggers (snapshot fetches, telemetry spans) and stdlib
loggers (services) render through one stderr handler, so stdout stays
reserved for command results.
"""

from __future__ import annotations

import logging
import sys

import structlog


def _processors(*, log_json: bool) -> list[structlog.types.Processor]:
    timestamper = (
        structlog.processors.TimeStamper(fmt="iso", utc=True)
        if log_json
        else structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False)
    )
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        timestamper,
    ]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route zonectl logs to stderr.

    Args:
        verbose: Show DEBUG events from ``zonectl.*``. Otherwise WARNING and up.
        log_json: One JSON object per line instead of console output.
    """
    pre_chain = _processors(log_json=log_json)
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("zonectl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    # asyncio.run() in SnapshotStore logs selector details at DEBUG.
    logging.getLogger("asyncio").setLevel(logging.WARNING)
