"""Response — the single reply every consumed command produces.

INVARIANT: One Response per consumed Command, always.
On the wire a Response is exactly one line starting with ``OK:`` or
``ERROR:``; that prefix is the only contract callers may rely on.
"""

from __future__ import annotations

from pydantic import BaseModel

from amctl.domain.errors import BridgeError, MalformedCommand

OK_PREFIX = "OK:"
ERROR_PREFIX = "ERROR:"


class Response(BaseModel):
    """Status plus human-readable detail.

    Attributes:
        ok: Whether the command succeeded.
        detail: Text rendered after the status prefix.
        verb: Verb that produced the response, when one was parsed.
        code: Error code for failures (never rendered on the wire).
    """

    model_config = {"frozen": True}

    ok: bool
    detail: str
    verb: str | None = None
    code: str | None = None

    @classmethod
    def success(cls, detail: str, *, verb: str | None = None) -> Response:
        return cls(ok=True, detail=detail, verb=verb)

    @classmethod
    def failure(cls, detail: str, *, verb: str | None = None, code: str | None = None) -> Response:
        return cls(ok=False, detail=detail, verb=verb, code=code)

    @classmethod
    def from_error(cls, exc: BridgeError, *, verb: str | None = None) -> Response:
        return cls(ok=False, detail=exc.message, verb=verb, code=exc.code)

    def render(self) -> str:
        """Render as one wire line, without the trailing newline."""
        prefix = OK_PREFIX if self.ok else ERROR_PREFIX
        detail = " ".join(self.detail.splitlines())
        return f"{prefix} {detail}" if detail else prefix


def parse_response(line: str) -> Response:
    """Read a wire line back into a Response (requester side).

    A line with neither prefix is reported as a failed response rather
    than raised, so callers always get something printable.
    """
    text = line.strip()
    for prefix, ok in ((OK_PREFIX, True), (ERROR_PREFIX, False)):
        if text.startswith(prefix):
            return Response(ok=ok, detail=text[len(prefix) :].strip())
    return Response.failure(
        f"Unrecognised response: {text!r}" if text else "Empty response",
        code=MalformedCommand.code,
    )
