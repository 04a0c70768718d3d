"""structlog configuration for amctl.

stdout is reserved for response lines, so every log record goes to stderr,
rendered either for a human (console renderer, colored on a TTY) or as JSON
lines (``--log-json``). Records from plain ``logging`` loggers pass through
the same processor chain, and anything bound with
:func:`bind_request_context` (verb, transport) is merged into each line.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from amctl.domain.types import Transport

LOGGER_NAME = "amctl"


def _pre_chain(log_json: bool) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_json:
        chain.append(structlog.processors.format_exc_info)
    return chain


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    level: int = logging.WARNING,
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Safe to call repeatedly; the root handler is replaced, never stacked.

    Args:
        verbose: Log amctl at DEBUG; overrides *level*.
        log_json: Emit JSON lines instead of console output.
        level: ``amctl`` logger level when not verbose. ``serve`` uses INFO.
    """
    pre_chain = _pre_chain(log_json)

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
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else level)


@contextmanager
def bind_request_context(verb: str | None, transport: Transport) -> Iterator[None]:
    """Tag every record logged inside the block with the request's verb and channel."""
    with structlog.contextvars.bound_contextvars(verb=verb, transport=str(transport)):
        yield
