"""Command grammar: one line in, a verb plus an unparsed payload out.

The first whitespace-delimited token is the verb, upper-cased for matching.
The remainder is kept verbatim and each verb applies its own sub-grammar:

- positional verbs take exactly N whitespace-delimited tokens
  (:func:`positional`);
- free-trailing verbs take the rest of the line as one opaque string
  (:func:`trailing`);
- ``START`` takes ``am``-style flags (:func:`parse_start_flags`).

Legacy callers send bare ``am`` arguments (``-a ACTION -d URI`` or a bare
URL) with no verb at all; those lines are read as ``START``.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass

from amctl.domain.errors import InvalidArgument, MalformedCommand, UsageError
from amctl.domain.intents import ACTION_VIEW, ActionDescription, Extra, is_web_url
from amctl.domain.types import Transport

logger = logging.getLogger(__name__)

START_VERB = "START"
START_USAGE = (
    "[-a ACTION] [-d URI] [-t TYPE] [-n PACKAGE/CLASS] [-c CATEGORY] [--es|--ez|--ei KEY VALUE]"
)

# flag -> ActionDescription field, each taking one value
_VALUE_FLAGS: dict[str, str] = {
    "-a": "action",
    "--action": "action",
    "-d": "data",
    "--data": "data",
    "-t": "mime_type",
    "--type": "mime_type",
    "-p": "package",
    "--package": "package",
}

_TRUE = frozenset({"true", "t", "1", "yes"})
_FALSE = frozenset({"false", "f", "0", "no"})
_TARGET_FIELDS = frozenset({"action", "data", "package"})


@dataclass(frozen=True)
class Command:
    """A single parsed request.

    Attributes:
        raw: The line exactly as received.
        verb: Upper-cased first token.
        args: Everything after the verb, stripped but otherwise untouched.
        transport: Channel the command arrived on.
    """

    raw: str
    verb: str
    args: str = ""
    transport: Transport = Transport.LOCAL

    @property
    def tokens(self) -> list[str]:
        return self.args.split()


def parse_command(raw: str, transport: Transport = Transport.LOCAL) -> Command:
    """Split *raw* into verb and payload.

    Only the first non-blank line is considered.

    Raises:
        MalformedCommand: If the input is empty or whitespace only.
    """
    lines = raw.strip().splitlines()
    line = lines[0].strip() if lines else ""
    if not line:
        raise MalformedCommand("Empty command")

    parts = line.split(None, 1)
    head = parts[0]
    if head.startswith("-") or is_web_url(head):
        return Command(raw=raw, verb=START_VERB, args=line, transport=transport)
    rest = parts[1].strip() if len(parts) > 1 else ""
    return Command(raw=raw, verb=head.upper(), args=rest, transport=transport)


def positional(command: Command, count: int, usage: str) -> list[str]:
    """Return exactly *count* tokens or raise :class:`UsageError`."""
    tokens = command.tokens
    if len(tokens) != count:
        raise UsageError(command.verb, usage)
    return tokens


def trailing(command: Command, usage: str) -> str:
    """Return the whole payload as one string; it must not be empty."""
    if not command.args:
        raise UsageError(command.verb, usage)
    return command.args


def _take(tokens: list[str], index: int, count: int, verb: str) -> list[str]:
    values = tokens[index + 1 : index + 1 + count]
    if len(values) != count:
        raise UsageError(verb, START_USAGE)
    return values


def _parse_bool(value: str, verb: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    logger.debug("Not a boolean extra value: %r", value)
    raise UsageError(verb, START_USAGE)


def _parse_int(value: str, verb: str) -> int:
    try:
        return int(value)
    except ValueError:
        logger.debug("Not an integer extra value: %r", value)
        raise UsageError(verb, START_USAGE) from None


def _split_component(value: str) -> tuple[str, str]:
    package, sep, class_name = value.partition("/")
    if not sep or not package or not class_name:
        msg = f"Invalid component: {value}"
        raise InvalidArgument(msg)
    if class_name.startswith("."):
        class_name = package + class_name
    return package, class_name


def parse_start_flags(args: str, *, verb: str = START_VERB) -> ActionDescription:
    """Parse ``am start``-style flags into an :class:`ActionDescription`.

    Quotes are honoured. A leading ``start`` token is skipped, ``--user N``
    is ignored, and a bare web URL is taken as the data URI. Without ``-a`` the action defaults
    to VIEW. Unrecognised flags and stray tokens are skipped.

    Raises:
        MalformedCommand: On unbalanced quotes.
        UsageError: When a flag is missing its value, an ``--ez``/``--ei``
            value has the wrong type, or no target was given.
        InvalidArgument: On a malformed component.
    """
    try:
        tokens = shlex.split(args)
    except ValueError as exc:
        msg = f"Malformed arguments: {exc}"
        raise MalformedCommand(msg) from exc

    if tokens and tokens[0].lower() == "start":
        tokens = tokens[1:]

    fields: dict[str, str] = {}
    categories: list[str] = []
    extras: dict[str, Extra] = {}

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in _VALUE_FLAGS:
            (value,) = _take(tokens, i, 1, verb)
            fields[_VALUE_FLAGS[token]] = value
            i += 2
        elif token in ("-n", "--component"):
            (value,) = _take(tokens, i, 1, verb)
            fields["package"], fields["class_name"] = _split_component(value)
            i += 2
        elif token in ("-c", "--category"):
            (value,) = _take(tokens, i, 1, verb)
            categories.append(value)
            i += 2
        elif token in ("--es", "--ez", "--ei"):
            key, value = _take(tokens, i, 2, verb)
            if token == "--ez":
                extras[key] = _parse_bool(value, verb)
            elif token == "--ei":
                extras[key] = _parse_int(value, verb)
            else:
                extras[key] = value
            i += 3
        elif token == "--user":
            _take(tokens, i, 1, verb)
            i += 2
        elif is_web_url(token) and "data" not in fields:
            fields["data"] = token
            i += 1
        else:
            logger.debug("Skipping unrecognised start token %r", token)
            i += 1

    if not fields.keys() & _TARGET_FIELDS:
        raise UsageError(verb, START_USAGE)
    fields.setdefault("action", ACTION_VIEW)

    return ActionDescription(**fields, categories=tuple(categories), extras=extras)
