"""Shared test fixtures for fanlog."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from fanlog.models.levels import Level
from fanlog.routing.dispatcher import Logger

FIXED_MOMENT = datetime(2017, 5, 31, 22, 29, 11, 748931, tzinfo=timezone(timedelta(hours=3)))


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep FANLOG_* variables and stray .env files out of every test."""
    for name in list(os.environ):
        if name.startswith("FANLOG_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class CaptureSink:
    """A sink that records every write."""

    def __init__(self, sink_id: str = "capture") -> None:
        self._sink_id = sink_id
        self.records: list[bytes] = []
        self.closed = False

    @property
    def sink_id(self) -> str:
        return self._sink_id

    def write(self, data: bytes) -> int:
        self.records.append(data)
        return len(data)

    def close(self) -> None:
        self.closed = True

    @property
    def lines(self) -> list[str]:
        return [record.decode("utf-8") for record in self.records]


class FakeResponse:
    """Just enough of ``requests.Response`` for the Telegram sink."""

    def __init__(
        self,
        status_code: int = 200,
        body: bytes = b'{"ok":true,"result":{"message_id":1}}',
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.content = body
        self.headers = headers or {}


class FakeSession:
    """Records POSTs and answers per chat id.

    ``outcomes`` maps a chat id to a ``FakeResponse`` or an exception
    instance to raise; unlisted chats get a 200 ``ok`` response.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.outcomes: dict[str, FakeResponse | Exception] = {}
        self.closed = False
        self.posted = threading.Event()

    def post(self, url: str, json: dict[str, Any] | None = None, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, "json": json, **kwargs})
        self.posted.set()
        outcome = self.outcomes.get(json["chat_id"] if json else "", FakeResponse())
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True

    @property
    def chats(self) -> list[str]:
        return [call["json"]["chat_id"] for call in self.calls]

    @property
    def texts(self) -> list[str]:
        return [call["json"]["text"] for call in self.calls]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def capture_sink() -> CaptureSink:
    return CaptureSink()


@pytest.fixture
def make_capture_sink() -> type[CaptureSink]:
    """The CaptureSink class, for tests needing several distinct sinks."""
    return CaptureSink


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fake_response() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_MOMENT


@pytest.fixture
def exit_calls() -> list[int]:
    """Collects exit statuses instead of terminating the test process."""
    return []


@pytest.fixture
def make_logger(
    fixed_clock: Callable[[], datetime], exit_calls: list[int]
) -> Callable[..., Logger]:
    """Factory fixture: a Logger with deterministic host, prefix and clock."""

    def _factory(threshold: Level | str = Level.DEBUG, **overrides: Any) -> Logger:
        defaults: dict[str, Any] = {
            "prefix": "app",
            "hostname": "host",
            "clock": fixed_clock,
            "exit_func": exit_calls.append,
        }
        defaults.update(overrides)
        return Logger(threshold, **defaults)

    return _factory


@pytest.fixture
def make_telegram_sink(fake_session: FakeSession, fixed_clock: Callable[[], datetime]):
    """Factory fixture: a TelegramSink posting through ``fake_session``."""
    from fanlog.routing.sinks.telegram import TelegramSink

    sinks: list[TelegramSink] = []

    def _factory(chat_ids: list[str] | None = None, **overrides: Any) -> TelegramSink:
        defaults: dict[str, Any] = {
            "session": fake_session,
            "clock": fixed_clock,
            "autostart": False,
        }
        defaults.update(overrides)
        sink = TelegramSink("TOKEN", chat_ids or ["1"], **defaults)
        sinks.append(sink)
        return sink

    yield _factory

    for sink in sinks:
        sink.close(timeout=1.0)
