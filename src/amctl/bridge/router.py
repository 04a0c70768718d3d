"""Dispatch table and router.

The dispatch table is built once from the handler sets and frozen. The
router parses a raw line, looks the verb up, and runs the handler in the
context its descriptor demands: foreground handlers reached from any other
thread are marshalled onto the foreground executor with a bounded wait.

INVARIANT: ``Router.dispatch`` never raises. Every outcome is a Response.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import partial
from types import MappingProxyType
from typing import TYPE_CHECKING

from amctl.config.logging import bind_request_context
from amctl.domain.errors import BridgeError, UnknownVerb, UsageError
from amctl.domain.grammar import Command, parse_command
from amctl.domain.types import ExecutionContext, Transport
from amctl.services.result import Response

if TYPE_CHECKING:
    from amctl.bridge.executor import ForegroundExecutor
    from amctl.services.base import BaseHandlerSet, HandlerDescriptor

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "INTERNAL_ERROR"


def build_dispatch_table(
    handler_sets: Iterable[BaseHandlerSet],
) -> Mapping[str, HandlerDescriptor]:
    """Collect descriptors into a read-only verb -> descriptor mapping.

    Raises:
        ValueError: If two handlers claim the same verb.
    """
    table: dict[str, HandlerDescriptor] = {}
    for handler_set in handler_sets:
        for descriptor in handler_set.descriptors():
            if descriptor.verb in table:
                msg = f"Duplicate handler for verb {descriptor.verb}"
                raise ValueError(msg)
            table[descriptor.verb] = descriptor
    return MappingProxyType(table)


class Router:
    """Parses, looks up, marshals, and converts failures to responses.

    Parameters:
        table: Frozen dispatch table.
        executor: The foreground worker.
        handoff_timeout: How long a non-foreground caller waits for a
            foreground handler. Keep it below the requester's timeout.
    """

    def __init__(
        self,
        table: Mapping[str, HandlerDescriptor],
        executor: ForegroundExecutor,
        *,
        handoff_timeout: float = 1.5,
    ) -> None:
        self._table = table
        self._executor = executor
        self._handoff_timeout = handoff_timeout

    @property
    def table(self) -> Mapping[str, HandlerDescriptor]:
        return self._table

    def dispatch(self, raw: str, transport: Transport = Transport.LOCAL) -> Response:
        """Handle one raw request line and return its Response."""
        verb: str | None = None
        try:
            command = parse_command(raw, transport)
            verb = command.verb
            with bind_request_context(verb, transport):
                logger.debug("Received %s via %s", verb, transport)
                return self._route(command)
        except BridgeError as exc:
            logger.debug("%s rejected: %s", verb or "command", exc.message)
            return Response.from_error(exc, verb=verb)
        except Exception as exc:
            logger.exception("Handler for %s failed", verb or "command")
            return Response.failure(str(exc) or type(exc).__name__, verb=verb, code=INTERNAL_ERROR)

    def _route(self, command: Command) -> Response:
        descriptor = self._table.get(command.verb)
        if descriptor is None or descriptor.handler is None:
            raise UnknownVerb(command.verb)
        if len(command.tokens) < descriptor.min_args:
            raise UsageError(command.verb, descriptor.usage)

        call = partial(descriptor.handler, command)
        if descriptor.context is ExecutionContext.FOREGROUND and not self._executor.is_current():
            return self._executor.call(call, timeout=self._handoff_timeout)
        return call()
