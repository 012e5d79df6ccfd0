"""Shared test fixtures and configuration."""

import asyncio
import os
from collections.abc import Callable
from typing import Any

import pytest

from termhold.application.ports import ConnectionClosed
from termhold.application.services import SessionRegistry
from termhold.domain import LaunchSpec, SessionId, TerminalDimensions

# ============= Domain Fixtures =============


@pytest.fixture
def default_dimensions():
    """Default terminal dimensions."""
    return TerminalDimensions.default()


@pytest.fixture
def session_id():
    """Sample session ID."""
    return SessionId("session-123")


@pytest.fixture
def launch_spec():
    """Plain sh launch."""
    return LaunchSpec(argv=("sh",))


# ============= Mock Fixtures =============


class FakePTY:
    """Fake PTY backed by an os.pipe, so the output pump can poll it."""

    def __init__(self, dimensions: TerminalDimensions | None = None):
        self._dimensions = dimensions or TerminalDimensions.default()
        self._read_fd, self._write_fd = os.pipe()
        self._alive = True
        self.closed = False
        self.killed = False
        self.written: list[bytes] = []
        self.resizes: list[TerminalDimensions] = []
        self.input_full = False
        self.resize_error: OSError | None = None

    # PTYPort

    @property
    def dimensions(self) -> TerminalDimensions:
        return self._dimensions

    def fileno(self) -> int:
        return self._read_fd

    def read(self, size: int = 4096) -> bytes:
        data = os.read(self._read_fd, size)
        if not data:
            raise EOFError("PTY closed")
        return data

    def write(self, data: bytes) -> int:
        if not self._alive:
            raise OSError("process exited")
        if self.input_full:
            raise BlockingIOError("input queue full")
        self.written.append(bytes(data))
        return len(data)

    def resize(self, dimensions: TerminalDimensions) -> None:
        if self.resize_error is not None:
            raise self.resize_error
        self._dimensions = dimensions
        self.resizes.append(dimensions)

    def is_alive(self) -> bool:
        return self._alive

    def kill(self) -> None:
        self.killed = True
        self.exit()

    def close(self) -> None:
        self.exit()
        if not self.closed:
            self.closed = True
            os.close(self._read_fd)

    # Test helpers

    def emit(self, data: bytes) -> None:
        """Make the process print ``data``."""
        os.write(self._write_fd, data)

    def exit(self) -> None:
        """Simulate the process going away."""
        if self._alive:
            self._alive = False
            os.close(self._write_fd)

    @property
    def input(self) -> bytes:
        return b"".join(self.written)


class FakePTYFactory:
    """PTY factory recording every spawn."""

    def __init__(self):
        self.spawned: list[tuple[LaunchSpec, str, TerminalDimensions]] = []
        self.ptys: list[FakePTY] = []
        self.error: Exception | None = None

    def __call__(self, launch: LaunchSpec, cwd: str, dimensions: TerminalDimensions) -> FakePTY:
        if self.error is not None:
            raise self.error
        pty = FakePTY(dimensions)
        self.spawned.append((launch, cwd, dimensions))
        self.ptys.append(pty)
        return pty

    @property
    def last(self) -> FakePTY:
        return self.ptys[-1]


class FakeConnection:
    """Fake client connection.

    Frames the client sends are fed through ``feed``; what the server sends
    is recorded in ``frames``.
    """

    def __init__(self):
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()
        self.frames: list[bytes | str] = []
        self.messages: list[dict[str, Any]] = []
        self.closed = False
        self.close_code: int | None = None
        self.fail_writes = False
        self.hold_writes: asyncio.Event | None = None

    async def send_output(self, data: bytes) -> None:
        await self._before_send()
        self.frames.append(data)

    async def send_text(self, text: str) -> None:
        await self._before_send()
        self.frames.append(text)

    async def send_message(self, message: dict[str, Any]) -> None:
        await self._before_send()
        self.messages.append(message)

    async def receive(self) -> bytes | str:
        item = await self._inbox.get()
        if isinstance(item, ConnectionClosed):
            self._inbox.put_nowait(item)
            raise item
        return item

    async def close(self, code: int = 1000) -> None:
        if self.closed:
            return
        self.closed = True
        self.close_code = code
        self._inbox.put_nowait(ConnectionClosed(code))

    def is_connected(self) -> bool:
        return not self.closed

    async def _before_send(self) -> None:
        if self.closed or self.fail_writes:
            raise RuntimeError("connection closed")
        if self.hold_writes is not None:
            await self.hold_writes.wait()

    # Test helpers

    def feed(self, frame: bytes | str) -> None:
        """Deliver a frame from the client."""
        self._inbox.put_nowait(frame)

    def disconnect(self, code: int | None = 1001) -> None:
        """Simulate the client going away."""
        self._inbox.put_nowait(ConnectionClosed(code))

    @property
    def output(self) -> bytes:
        return b"".join(f for f in self.frames if isinstance(f, bytes))

    @property
    def texts(self) -> list[str]:
        return [f for f in self.frames if isinstance(f, str)]


async def eventually(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Wait until ``predicate`` holds, failing the test after ``timeout`` seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


@pytest.fixture
def fake_pty(default_dimensions):
    """Fake PTY for testing."""
    pty = FakePTY(default_dimensions)
    yield pty
    pty.close()


@pytest.fixture
def pty_factory():
    """Factory that creates fake PTYs."""
    factory = FakePTYFactory()
    yield factory
    for pty in factory.ptys:
        pty.close()


@pytest.fixture
def connection():
    """Fake client connection."""
    return FakeConnection()


# ============= Registry Fixtures =============


@pytest.fixture
async def registry(pty_factory, launch_spec, tmp_path):
    """Registry spawning fake PTYs in a temporary directory."""
    reg = SessionRegistry(
        pty_factory=pty_factory,
        launch_builder=lambda: launch_spec,
        default_cwd=str(tmp_path),
    )
    yield reg
    await reg.close_all()
