"""BaseHandlerSet — foundation for every group of verb handlers.

Handlers are plain methods taking a :class:`Command` and returning a
:class:`Response`, marked with :func:`handles`. A handler set reports its
verbs as :class:`HandlerDescriptor` objects, which the router freezes into
its dispatch table at startup.

Usage::

    class PingHandlers(BaseHandlerSet):
        @handles("PING", context=ExecutionContext.ANY)
        def ping(self, command: Command) -> Response:
            return Response.success("pong", verb=command.verb)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from amctl.domain.types import ExecutionContext

if TYPE_CHECKING:
    from amctl.domain.grammar import Command
    from amctl.services.platform import Platform
    from amctl.services.result import Response

logger = logging.getLogger(__name__)

Handler = Callable[["Command"], "Response"]

_VERB_ATTR = "_amctl_verb"


@dataclass(frozen=True)
class HandlerDescriptor:
    """One row of the dispatch table.

    Attributes:
        verb: Upper-case verb the handler answers to.
        context: Where the handler must run.
        handler: Bound callable; None only on the unbound spec.
        usage: Expected arguments, rendered in ``Usage:`` errors.
        min_args: Fewest whitespace tokens the router accepts before calling.
        summary: One-line description for ``amctl verbs``.
    """

    verb: str
    context: ExecutionContext
    handler: Handler | None = None
    usage: str = ""
    min_args: int = 0
    summary: str = ""


def handles(
    verb: str,
    *,
    context: ExecutionContext = ExecutionContext.FOREGROUND,
    usage: str = "",
    min_args: int = 0,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark a handler method as serving *verb*."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        doc = (func.__doc__ or "").strip().splitlines()
        spec = HandlerDescriptor(
            verb=verb.upper(),
            context=context,
            usage=usage,
            min_args=min_args,
            summary=doc[0] if doc else "",
        )
        setattr(func, _VERB_ATTR, spec)
        return func

    return decorator


class BaseHandlerSet:
    """Abstract base for handler sets.

    Every handler set receives the :class:`Platform` facade, its only way
    to reach injected capabilities and notification hooks.
    """

    def __init__(self, platform: Platform) -> None:
        self._platform = platform

    def descriptors(self) -> list[HandlerDescriptor]:
        """Descriptors for every ``@handles`` method, bound to this instance."""
        found: list[HandlerDescriptor] = []
        for name in sorted(dir(type(self))):
            spec = getattr(getattr(type(self), name, None), _VERB_ATTR, None)
            if spec is not None:
                found.append(replace(spec, handler=getattr(self, name)))
        return found

    def _notify(self, hook_name: str, **payload: Any) -> None:
        """Fire a notification hook.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            self._platform.notify(hook_name, payload)
        except Exception:
            logger.warning("Notification %s failed", hook_name, exc_info=True)
