"""Liveness check."""

from __future__ import annotations

from amctl.domain.grammar import Command
from amctl.domain.types import ExecutionContext
from amctl.services.base import BaseHandlerSet, handles
from amctl.services.result import Response


class SystemHandlers(BaseHandlerSet):
    @handles("PING", context=ExecutionContext.ANY)
    def ping(self, command: Command) -> Response:
        """Check that the bridge is answering."""
        return Response.success("pong", verb=command.verb)
