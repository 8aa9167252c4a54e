"""Structured logging for hf_inference.

structlog renders both its own events and stdlib ``logging`` records, so the
service's key-value events and the plain messages from the transport and
resolver end up in one stream. Per-call fields such as ``request_id`` live in
structlog's context variables and are merged into every event.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from typing import Iterator

import structlog

# Third-party loggers that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3.connectionpool")


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR
        json_output: JSON lines instead of colored console output
    """
    shared = _shared_processors()
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def request_context(**fields) -> Iterator[str]:
    """Bind a fresh ``request_id`` (plus ``fields``) for the duration of a call.

    Values bound by the caller, including an outer ``request_id``, are
    restored on exit.

    Yields:
        The generated request id
    """
    request_id = uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(request_id=request_id, **fields):
        yield request_id
