"""Tests for the dispatch table and router."""

from __future__ import annotations

import threading
from collections.abc import Generator

import pytest

from amctl.bridge.executor import ForegroundExecutor
from amctl.bridge.router import INTERNAL_ERROR, Router, build_dispatch_table
from amctl.domain.grammar import Command
from amctl.domain.types import ExecutionContext, Transport
from amctl.services.base import BaseHandlerSet, handles
from amctl.services.platform import Platform
from amctl.services.result import Response
from amctl.services.system import SystemHandlers


class RecordingHandlers(BaseHandlerSet):
    """Handlers that report where and how they were called."""

    def __init__(self, platform: Platform) -> None:
        super().__init__(platform)
        self.release = threading.Event()
        self.release.set()
        self.calls: list[Command] = []

    @handles("WHERE")
    def where(self, command: Command) -> Response:
        self.calls.append(command)
        return Response.success(str(threading.get_ident()), verb=command.verb)

    @handles("ANYWHERE", context=ExecutionContext.ANY)
    def anywhere(self, command: Command) -> Response:
        return Response.success(str(threading.get_ident()), verb=command.verb)

    @handles("PAIR", usage="a b", min_args=2)
    def pair(self, command: Command) -> Response:
        return Response.success(command.args, verb=command.verb)

    @handles("SLOW")
    def slow(self, command: Command) -> Response:
        self.release.wait(5)
        return Response.success("late", verb=command.verb)

    @handles("CRASH", context=ExecutionContext.ANY)
    def crash(self, command: Command) -> Response:
        raise KeyError("boom")


@pytest.fixture
def recorder(platform: Platform) -> RecordingHandlers:
    return RecordingHandlers(platform)


@pytest.fixture
def executor() -> Generator[ForegroundExecutor]:
    ex = ForegroundExecutor()
    yield ex
    ex.shutdown()


@pytest.fixture
def router(recorder: RecordingHandlers, executor: ForegroundExecutor) -> Router:
    return Router(build_dispatch_table([recorder]), executor, handoff_timeout=0.2)


class TestDispatchTable:
    def test_table_is_read_only(self, router: Router) -> None:
        with pytest.raises(TypeError):
            router.table["NEW"] = router.table["WHERE"]  # type: ignore[index]

    def test_duplicate_verb_rejected(self, platform: Platform) -> None:
        with pytest.raises(ValueError, match="Duplicate handler for verb PING"):
            build_dispatch_table([SystemHandlers(platform), SystemHandlers(platform)])

    def test_verbs(self, router: Router) -> None:
        assert set(router.table) == {"WHERE", "ANYWHERE", "PAIR", "SLOW", "CRASH"}


class TestDispatch:
    def test_verb_is_case_insensitive(self, router: Router) -> None:
        assert router.dispatch("where").ok
        assert router.dispatch("Where").ok

    def test_unknown_verb(self, router: Router) -> None:
        response = router.dispatch("FOO bar")
        assert response.render() == "ERROR: Unknown command: FOO"
        assert response.code == "UNKNOWN_VERB"
        assert response.verb == "FOO"

    def test_empty_line(self, router: Router) -> None:
        response = router.dispatch("   \n")
        assert response.render() == "ERROR: Empty command"
        assert response.verb is None

    def test_min_args(self, router: Router) -> None:
        assert router.dispatch("PAIR one").render() == "ERROR: Usage: PAIR a b"
        assert router.dispatch("PAIR one two").render() == "OK: one two"

    def test_only_first_line_is_read(self, router: Router, recorder: RecordingHandlers) -> None:
        router.dispatch("WHERE\nCRASH\n")
        assert len(recorder.calls) == 1

    def test_transport_is_recorded(self, router: Router, recorder: RecordingHandlers) -> None:
        router.dispatch("WHERE", Transport.SOCKET)
        assert recorder.calls[0].transport is Transport.SOCKET

    def test_unexpected_exception_becomes_response(self, router: Router) -> None:
        response = router.dispatch("CRASH")
        assert not response.ok
        assert response.code == INTERNAL_ERROR
        assert response.render().startswith("ERROR: ")


class TestContexts:
    def test_foreground_handler_is_marshalled(
        self, router: Router, executor: ForegroundExecutor
    ) -> None:
        worker = executor.call(threading.get_ident, timeout=2)
        assert router.dispatch("WHERE").detail == str(worker)

    def test_any_handler_runs_on_caller(self, router: Router) -> None:
        assert router.dispatch("ANYWHERE").detail == str(threading.get_ident())

    def test_foreground_caller_runs_inline(
        self, router: Router, executor: ForegroundExecutor
    ) -> None:
        response = executor.call(lambda: router.dispatch("WHERE"), timeout=2)
        assert response.ok

    def test_handoff_timeout(self, router: Router, recorder: RecordingHandlers) -> None:
        recorder.release.clear()
        try:
            response = router.dispatch("SLOW")
        finally:
            recorder.release.set()
        assert not response.ok
        assert response.code == "FOREGROUND_UNAVAILABLE"

    def test_any_handler_unaffected_by_busy_foreground(
        self, router: Router, recorder: RecordingHandlers, executor: ForegroundExecutor
    ) -> None:
        recorder.release.clear()
        executor.submit(router.dispatch, "SLOW")
        try:
            assert router.dispatch("ANYWHERE").ok
        finally:
            recorder.release.set()
