"""Error taxonomy for the command bridge.

Every failure a requester can observe maps to one of these classes. The
router converts them to ``ERROR: <message>`` lines; only ``RequestTimeout``
and ``BridgeUnavailable`` are raised on the requester side and never
cross the wire.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for all bridge failures.

    Attributes:
        message: Human-readable detail rendered after ``ERROR:``.
        code: Stable machine-readable identifier.
    """

    code = "BRIDGE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedCommand(BridgeError):
    """Input could not be parsed at all (empty line, broken quoting)."""

    code = "MALFORMED_COMMAND"


class UnknownVerb(BridgeError):
    """No handler is registered for the verb."""

    code = "UNKNOWN_VERB"

    def __init__(self, verb: str) -> None:
        super().__init__(f"Unknown command: {verb}")
        self.verb = verb


class InvalidArgument(BridgeError):
    """Argument has the wrong type, is out of range, or is missing."""

    code = "INVALID_ARGUMENT"


class UsageError(InvalidArgument):
    """Wrong arity or shape; message carries the verb's usage line."""

    def __init__(self, verb: str, usage: str) -> None:
        message = f"Usage: {verb} {usage}".rstrip()
        super().__init__(message)
        self.verb = verb
        self.usage = usage


class ForegroundUnavailable(BridgeError):
    """The hand-off to the foreground worker timed out or was refused."""

    code = "FOREGROUND_UNAVAILABLE"


class PlatformRejected(BridgeError):
    """The platform refused to perform the requested action."""

    code = "PLATFORM_REJECTED"


class RequestTimeout(BridgeError):
    """Requester gave up waiting for a response."""

    code = "TIMEOUT"

    def __init__(self, message: str = "Command timed out") -> None:
        super().__init__(message)


class BridgeUnavailable(BridgeError):
    """Requester could not reach the bridge over the chosen channel."""

    code = "BRIDGE_UNAVAILABLE"
