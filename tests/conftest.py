import asyncio
import json
import os
from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest

from editor_link.domain.connection import ConnectionManager
from editor_link.domain.dispatcher import ProtocolDispatcher
from editor_link.domain.errors import TransportError
from editor_link.domain.messages import DancerStatus, Identity


RELAY_URL = "ws://relay.test"
EDITOR_NAME = "editor-host"
RETRY_DELAY_SECONDS = 0.01

_HANG_UP = object()


def frame(task: str, payload: Any) -> str:
    return json.dumps([task, payload])


async def eventually(condition: Callable[[], bool], timeout: float = 1.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not condition():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


class RecordingSink:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def update_dancer_status(self, name: str, status: DancerStatus) -> None:
        self.calls.append(("update_dancer_status", name, status))

    def start_play(self, payload: Any) -> None:
        self.calls.append(("start_play", payload))

    def set_playing(self, playing: bool) -> None:
        self.calls.append(("set_playing", playing))

    def set_stopped(self, stopped: bool) -> None:
        self.calls.append(("set_stopped", stopped))

    def status_updates(self) -> list[tuple]:
        return [call for call in self.calls if call[0] == "update_dancer_status"]


class FakeRelaySocket:
    def __init__(self, frames: list[str | bytes] | None = None) -> None:
        self.sent: list[str] = []
        self.closed = False
        self.fail_sends = False
        self._incoming: asyncio.Queue = asyncio.Queue()
        for item in frames or []:
            self._incoming.put_nowait(item)

    def feed(self, *frames: str | bytes) -> None:
        for item in frames:
            self._incoming.put_nowait(item)

    def hang_up(self) -> None:
        self._incoming.put_nowait(_HANG_UP)

    def break_connection(self, reason: str = "connection reset") -> None:
        self._incoming.put_nowait(TransportError(reason))

    def sent_messages(self) -> list[list]:
        return [json.loads(item) for item in self.sent]

    async def send(self, frame: str) -> None:
        if self.fail_sends or self.closed:
            raise TransportError("socket is closed")
        self.sent.append(frame)

    async def frames(self) -> AsyncIterator[str | bytes]:
        while True:
            item = await self._incoming.get()
            if item is _HANG_UP:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    async def close(self) -> None:
        self.closed = True


class FakeRelayTransport:
    def __init__(
        self,
        sockets: list[FakeRelaySocket] | None = None,
        failures: int = 0,
    ) -> None:
        self._pending = list(sockets or [])
        self._failures = failures
        self.attempts = 0
        self.urls: list[str] = []
        self.sockets: list[FakeRelaySocket] = []

    def fail_next(self, count: int) -> None:
        self._failures = count

    async def connect(self, url: str) -> FakeRelaySocket:
        self.attempts += 1
        self.urls.append(url)
        if self._failures:
            self._failures -= 1
            raise TransportError(f"connection refused: {url}")
        socket = self._pending.pop(0) if self._pending else FakeRelaySocket()
        self.sockets.append(socket)
        return socket


@pytest.fixture(autouse=True)
def _isolate_environ():
    saved = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def dispatcher(sink):
    return ProtocolDispatcher(sink)


@pytest.fixture
def transport():
    return FakeRelayTransport()


@pytest.fixture
async def manager(transport, dispatcher):
    manager = ConnectionManager(
        transport=transport,
        dispatcher=dispatcher,
        relay_url=RELAY_URL,
        identity=Identity(name=EDITOR_NAME),
        retry_delay_seconds=RETRY_DELAY_SECONDS,
    )
    yield manager
    await manager.stop()
