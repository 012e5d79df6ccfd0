"""Session actor - one PTY process, its scrollback and the attached connection."""

import asyncio
import errno
import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime

from termhold.domain import (
    SCROLLBACK_MAX_BYTES,
    PTYPort,
    ScrollbackBuffer,
    SessionId,
    SessionInfo,
    SessionState,
    TerminalDimensions,
)

from ..ports.connection_port import ConnectionPort

logger = logging.getLogger(__name__)

# Constants
READ_CHUNK_SIZE = 4096
MAX_PENDING_FRAMES = 1024
FLUSH_TIMEOUT = 2.0  # seconds
PUMP_STOP_TIMEOUT = 5.0  # seconds
TERMINATION_NOTICE = "\r\n[Terminal exited]"

# Sent before scrollback replay when enabled: leave alt-screen, reset attributes
REPLAY_RESET_SEQUENCE = b"\x1b[?1049l\x1b[0m"

_END = None


def _resolve(future: asyncio.Future) -> None:
    if not future.done():
        future.set_result(None)


class Attachment:
    """One connection's subscription to a session's output stream.

    Frames are queued in emission order and written by a dedicated task,
    so the output pump never waits on the network.
    """

    def __init__(self, connection: ConnectionPort, max_pending: int = MAX_PENDING_FRAMES) -> None:
        self.connection = connection
        self._max_pending = max_pending
        self._queue: asyncio.Queue[bytes | str | None] = asyncio.Queue()
        self._ended = asyncio.Event()
        self._writer: asyncio.Task[None] | None = None

    @property
    def ended(self) -> bool:
        """True once nothing more will be written to the connection."""
        return self._ended.is_set()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def wait_ended(self) -> None:
        await self._ended.wait()

    def offer(self, frame: bytes | str) -> bool:
        """Queue a frame. Returns False when the client has fallen too far behind."""
        if self._queue.qsize() >= self._max_pending:
            return False
        self._queue.put_nowait(frame)
        return True

    def finish(self, notice: str | None = None) -> None:
        """Queue a final text notice, ignoring the backlog limit, and end the stream."""
        if notice is not None:
            self._queue.put_nowait(notice)
        self._queue.put_nowait(_END)

    def start(self, on_write_error: Callable[["Attachment", Exception], None]) -> None:
        self._writer = asyncio.get_running_loop().create_task(self._write_loop(on_write_error))

    def abandon(self) -> None:
        """Stop writing now; frames still queued are discarded."""
        writer = self._writer
        if writer is not None and not writer.done() and writer is not asyncio.current_task():
            writer.cancel()
        self._ended.set()

    async def close(self, flush: bool = False, timeout: float = FLUSH_TIMEOUT) -> None:
        """End the stream and close the connection, optionally delivering queued frames first."""
        writer = self._writer
        if flush and writer is not None and not writer.done():
            self._queue.put_nowait(_END)
            _, pending = await asyncio.wait({writer}, timeout=timeout)
            if pending:
                logger.warning("Flush timed out, dropping %d queued frames", self._queue.qsize())
        self.abandon()
        await self.connection.close()

    async def _write_loop(self, on_write_error: Callable[["Attachment", Exception], None]) -> None:
        try:
            while True:
                frame = await self._queue.get()
                if frame is _END:
                    return
                if isinstance(frame, bytes):
                    await self.connection.send_output(frame)
                else:
                    await self.connection.send_text(frame)
        except Exception as e:
            on_write_error(self, e)
        finally:
            self._ended.set()


class Session:
    """A long-lived shell process addressable across reconnects.

    All cross-task access to the mutable state goes through this class.
    The scrollback and the attachment pointer share one lock, which is
    never held across an ``await``. The PTY handle has a single reader
    (the output pump) and a single writer (``write``).
    """

    def __init__(
        self,
        session_id: SessionId,
        name: str,
        cwd: str,
        pty_handle: PTYPort,
        *,
        created_at: datetime | None = None,
        scrollback_bytes: int = SCROLLBACK_MAX_BYTES,
        replay_prefix: bytes = b"",
        max_pending: int = MAX_PENDING_FRAMES,
    ) -> None:
        self.id = session_id
        self.name = name
        self.cwd = cwd
        self.created_at = created_at or datetime.now(UTC)

        self._pty = pty_handle
        self._dimensions = pty_handle.dimensions
        self._scrollback = ScrollbackBuffer(max_bytes=scrollback_bytes)
        self._replay_prefix = replay_prefix
        self._max_pending = max_pending

        self._lock = threading.Lock()
        self._attachment: Attachment | None = None
        self._terminated = asyncio.Event()
        self._closed = asyncio.Event()
        self._closing = False

        self._pump_task: asyncio.Task[None] | None = None
        self._write_lock = asyncio.Lock()
        self._write_ready: asyncio.Future[None] | None = None
        self._on_exit: Callable[[Session], None] | None = None

    # ============= State =============

    @property
    def dimensions(self) -> TerminalDimensions:
        return self._dimensions

    @property
    def connected(self) -> bool:
        with self._lock:
            return self._attachment is not None

    @property
    def terminated(self) -> bool:
        return self._terminated.is_set()

    @property
    def state(self) -> SessionState:
        with self._lock:
            if self._terminated.is_set():
                return SessionState.TERMINATED
            if self._attachment is not None:
                return SessionState.ATTACHED
            return SessionState.RUNNING

    @property
    def scrollback_size(self) -> int:
        with self._lock:
            return self._scrollback.size

    @property
    def output_total(self) -> int:
        """Bytes the process has emitted since the session started."""
        with self._lock:
            return self._scrollback.total_written

    def info(self) -> SessionInfo:
        return SessionInfo(
            id=str(self.id),
            name=self.name,
            cwd=self.cwd,
            created_at=self.created_at,
            connected=self.connected,
        )

    async def wait_terminated(self) -> None:
        await self._terminated.wait()

    # ============= Lifecycle =============

    def start(self, on_exit: Callable[["Session"], None] | None = None) -> None:
        """Start the output pump. ``on_exit`` runs once when the process goes away."""
        if self._pump_task is not None:
            raise RuntimeError(f"Session {self.id} already started")
        self._on_exit = on_exit
        self._pump_task = asyncio.get_running_loop().create_task(
            self._pump(), name=f"pump-{self.id}"
        )

    async def close(self) -> None:
        """Close the attached connection, kill the process and release the PTY.

        Idempotent: concurrent and repeated calls wait for the first one.
        """
        if self._closing:
            await self._closed.wait()
            return
        self._closing = True
        # A write parked on a full input queue gives up now
        if self._write_ready is not None:
            _resolve(self._write_ready)

        try:
            with self._lock:
                attachment, self._attachment = self._attachment, None
            if attachment is not None:
                await attachment.close(flush=True)

            self._pty.kill()
            await self._stop_pump()
            await asyncio.to_thread(self._pty.close)
        finally:
            self._closed.set()

        logger.info("Session closed session_id=%s", self.id)

    async def _stop_pump(self) -> None:
        task = self._pump_task
        if task is None:
            self._on_terminated()
            return

        _, pending = await asyncio.wait({task}, timeout=PUMP_STOP_TIMEOUT)
        if pending:
            logger.warning("Output pump still running after kill, cancelling session_id=%s", self.id)
            task.cancel()
            await asyncio.wait({task})

    # ============= Attachment =============

    async def attach(self, connection: ConnectionPort) -> Attachment:
        """Attach a connection, evicting any previous one (last attacher wins).

        The scrollback snapshot is queued under the lock, so it precedes
        every live chunk the pump forwards afterwards.
        """
        attachment = Attachment(connection, self._max_pending)

        with self._lock:
            previous = self._attachment
            snapshot = self._scrollback.snapshot()
            if snapshot:
                if self._replay_prefix:
                    attachment.offer(self._replay_prefix)
                attachment.offer(snapshot)
            if self._terminated.is_set():
                attachment.finish(TERMINATION_NOTICE)
            self._attachment = attachment
            attachment.start(self._on_write_error)

        if previous is not None:
            logger.info("Evicting previous connection session_id=%s", self.id)
            await previous.close()

        logger.info(
            "Connection attached session_id=%s replayed_bytes=%d", self.id, len(snapshot)
        )
        return attachment

    def detach(self, attachment: Attachment) -> bool:
        """Detach if ``attachment`` is still current. The process keeps running."""
        with self._lock:
            if self._attachment is not attachment:
                return False
            self._attachment = None

        attachment.abandon()
        logger.info("Connection detached session_id=%s", self.id)
        return True

    def _on_write_error(self, attachment: Attachment, error: Exception) -> None:
        logger.info("Write to connection failed session_id=%s error=%s", self.id, error)
        self.detach(attachment)

    # ============= Terminal I/O =============

    def resize(self, dimensions: TerminalDimensions) -> None:
        """Resize the PTY whether or not a connection is attached."""
        self._pty.resize(dimensions)
        self._dimensions = dimensions
        logger.info(
            "Terminal resized session_id=%s cols=%d rows=%d",
            self.id,
            dimensions.cols,
            dimensions.rows,
        )

    async def write(self, data: bytes) -> None:
        """Write client input to the process.

        Waits on the event loop while the terminal input queue is full, so a
        process that stops reading stalls only its own writer.

        Raises:
            OSError: The PTY is gone or the session is closing.
        """
        async with self._write_lock:
            view = memoryview(data)
            while view:
                if self._closing:
                    raise OSError(errno.EIO, f"session {self.id} is closing")
                try:
                    written = self._pty.write(view)
                except (BlockingIOError, InterruptedError):
                    await self._wait_writable()
                    continue
                view = view[written:]

    # ============= Output pump =============

    async def _pump(self) -> None:
        """Read PTY output until the process goes away."""
        try:
            while True:
                try:
                    await self._wait_readable()
                    data = self._pty.read(READ_CHUNK_SIZE)
                except (BlockingIOError, InterruptedError):
                    continue
                except (EOFError, OSError, ValueError) as e:
                    logger.debug("PTY read ended session_id=%s: %s", self.id, e)
                    break

                if not data:
                    break
                self._on_output(data)
        finally:
            self._on_terminated()

    async def _wait_readable(self) -> None:
        loop = asyncio.get_running_loop()
        fd = self._pty.fileno()
        ready = loop.create_future()
        loop.add_reader(fd, _resolve, ready)
        try:
            await ready
        finally:
            loop.remove_reader(fd)

    async def _wait_writable(self) -> None:
        loop = asyncio.get_running_loop()
        fd = self._pty.fileno()
        ready = loop.create_future()
        self._write_ready = ready
        loop.add_writer(fd, _resolve, ready)
        try:
            await ready
        finally:
            self._write_ready = None
            loop.remove_writer(fd)

    def _on_output(self, data: bytes) -> None:
        dropped = None
        with self._lock:
            self._scrollback.append(data)
            attachment = self._attachment
            if attachment is not None and not attachment.offer(data):
                self._attachment = None
                dropped = attachment

        if dropped is not None:
            logger.warning("Connection too slow, dropping it session_id=%s", self.id)
            dropped.abandon()

    def _on_terminated(self) -> None:
        with self._lock:
            if self._terminated.is_set():
                return
            attachment = self._attachment
            if attachment is not None:
                attachment.finish(TERMINATION_NOTICE)
            self._terminated.set()

        logger.info("Terminal exited session_id=%s attached=%s", self.id, attachment is not None)
        if self._on_exit is not None:
            self._on_exit(self)
