"""Logging setup shared by the CLI stages.

The ``preprocess``, ``generate``, ``cluster``, ``run`` and ``sweep``
commands report progress as structlog events (``preprocess_complete``,
``graphs_generated``, ``distance_matrix_computed``,
``clustering_complete``, ``cluster_run_complete``) and abort with
``run_aborted``.  Those events and plain ``logging`` records go through
one ``ProcessorFormatter``: JSON lines for batch runs, or a plain
console view when working interactively.  Logs go to stderr so they
never mix with the metrics tables printed on stdout.
"""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_output: Render JSON lines instead of the console renderer.
        log_level: Root log level name (``"DEBUG"``, ``"INFO"``, ...).
        stream: Destination stream, ``sys.stderr`` by default.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper()))
