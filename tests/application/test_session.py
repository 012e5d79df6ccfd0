"""Tests for the Session actor."""

import asyncio

import pytest

from termhold.application.services import TERMINATION_NOTICE, Session
from termhold.domain import SessionId, SessionState, TerminalDimensions

from conftest import FakeConnection, eventually


@pytest.fixture
async def session(fake_pty, tmp_path):
    """Started session over a fake PTY."""
    session = Session(SessionId("session-1"), "Terminal", str(tmp_path), fake_pty)
    session.start()
    yield session
    await session.close()


class TestOutput:
    """Scrollback and live output delivery."""

    async def test_output_recorded_while_detached(self, session, fake_pty):
        fake_pty.emit(b"hello")

        await eventually(lambda: session.scrollback_size == 5)
        assert session.state == SessionState.RUNNING
        assert not session.connected

    async def test_replay_then_live_without_gap_or_duplicate(self, session, fake_pty):
        fake_pty.emit(b"hello ")
        await eventually(lambda: session.output_total == 6)
        conn = FakeConnection()

        await session.attach(conn)
        fake_pty.emit(b"world")

        await eventually(lambda: conn.output == b"hello world")
        assert session.state == SessionState.ATTACHED

    async def test_replay_is_limited_to_scrollback_window(self, fake_pty, tmp_path):
        session = Session(SessionId("session-1"), "t", str(tmp_path), fake_pty, scrollback_bytes=8)
        session.start()
        try:
            fake_pty.emit(b"0123456789")
            await eventually(lambda: session.output_total == 10)
            conn = FakeConnection()

            await session.attach(conn)

            await eventually(lambda: conn.output == b"23456789")
        finally:
            await session.close()

    async def test_replay_prefix_sent_before_snapshot(self, fake_pty, tmp_path):
        session = Session(SessionId("session-1"), "t", str(tmp_path), fake_pty, replay_prefix=b"<R>")
        session.start()
        try:
            fake_pty.emit(b"abc")
            await eventually(lambda: session.output_total == 3)
            conn = FakeConnection()

            await session.attach(conn)

            await eventually(lambda: conn.output == b"<R>abc")
        finally:
            await session.close()

    async def test_no_replay_when_scrollback_empty(self, fake_pty, tmp_path):
        session = Session(SessionId("session-1"), "t", str(tmp_path), fake_pty, replay_prefix=b"<R>")
        session.start()
        try:
            conn = FakeConnection()
            await session.attach(conn)
            await asyncio.sleep(0.05)

            assert conn.frames == []
        finally:
            await session.close()


class TestAttachment:
    """Attach, detach and eviction."""

    async def test_last_attacher_wins(self, session, fake_pty):
        first = FakeConnection()
        second = FakeConnection()
        attachment1 = await session.attach(first)

        await session.attach(second)
        fake_pty.emit(b"x")

        await eventually(lambda: second.output == b"x")
        assert first.closed
        assert attachment1.ended
        assert first.output == b""

    async def test_stale_detach_is_ignored(self, session):
        attachment1 = await session.attach(FakeConnection())
        await session.attach(FakeConnection())

        assert session.detach(attachment1) is False
        assert session.connected

    async def test_detach_keeps_process_running(self, session, fake_pty):
        attachment = await session.attach(FakeConnection())

        assert session.detach(attachment) is True
        fake_pty.emit(b"later")

        await eventually(lambda: session.output_total == 5)
        assert not session.connected
        assert not session.terminated

    async def test_write_error_detaches(self, session, fake_pty):
        conn = FakeConnection()
        conn.fail_writes = True
        await session.attach(conn)

        fake_pty.emit(b"data")

        await eventually(lambda: not session.connected)
        assert not session.terminated

    async def test_slow_connection_is_dropped(self, fake_pty, tmp_path):
        session = Session(SessionId("session-1"), "t", str(tmp_path), fake_pty, max_pending=2)
        session.start()
        try:
            conn = FakeConnection()
            conn.hold_writes = asyncio.Event()
            attachment = await session.attach(conn)

            for i in range(1, 5):
                fake_pty.emit(b"x")
                await eventually(lambda i=i: session.output_total == i)

            await eventually(lambda: not session.connected)
            assert attachment.ended
            # Output keeps accumulating for the next attacher
            assert session.scrollback_size == 4
        finally:
            await session.close()


class TestTerminalIO:
    """Input and resize."""

    async def test_write_forwards_input(self, session, fake_pty):
        await session.write(b"ls\n")

        assert fake_pty.input == b"ls\n"

    async def test_full_input_queue_parks_only_the_writer(self, session, fake_pty):
        """A process that stops reading input never stalls the event loop."""
        fake_pty.input_full = True
        write = asyncio.create_task(session.write(b"x" * 200_000))

        fake_pty.emit(b"still pumping")

        await eventually(lambda: session.output_total == 13)
        assert not write.done()

        await session.close()
        with pytest.raises(OSError):
            await asyncio.wait_for(write, timeout=2)

    async def test_writes_are_serialized(self, session, fake_pty):
        await asyncio.gather(session.write(b"one "), session.write(b"two"))

        assert fake_pty.input == b"one two"

    async def test_write_after_close_raises(self, session):
        await session.close()

        with pytest.raises(OSError):
            await session.write(b"late")

    async def test_resize_without_attachment(self, session, fake_pty):
        dims = TerminalDimensions(cols=132, rows=43)

        session.resize(dims)

        assert fake_pty.dimensions == dims
        assert session.dimensions == dims


class TestTermination:
    """Process exit handling."""

    async def test_attached_client_gets_notice(self, session, fake_pty):
        conn = FakeConnection()
        attachment = await session.attach(conn)
        fake_pty.emit(b"bye")
        await eventually(lambda: conn.output == b"bye")

        fake_pty.exit()

        await eventually(lambda: attachment.ended)
        assert conn.texts == [TERMINATION_NOTICE]
        assert session.terminated
        assert session.state == SessionState.TERMINATED

    async def test_on_exit_called_once(self, fake_pty, tmp_path):
        exited = []
        session = Session(SessionId("session-1"), "t", str(tmp_path), fake_pty)
        session.start(on_exit=exited.append)

        fake_pty.exit()
        await session.wait_terminated()
        await session.close()

        assert exited == [session]

    async def test_attach_after_exit_replays_then_ends(self, session, fake_pty):
        fake_pty.emit(b"last words")
        await eventually(lambda: session.output_total == 10)
        fake_pty.exit()
        await session.wait_terminated()
        conn = FakeConnection()

        attachment = await session.attach(conn)

        await eventually(lambda: attachment.ended)
        assert conn.frames == [b"last words", TERMINATION_NOTICE]


class TestClose:
    """Explicit teardown."""

    async def test_close_kills_and_releases_pty(self, session, fake_pty):
        conn = FakeConnection()
        await session.attach(conn)

        await session.close()

        assert fake_pty.killed
        assert fake_pty.closed
        assert conn.closed
        assert session.terminated

    async def test_close_is_idempotent(self, session):
        await asyncio.gather(session.close(), session.close())
        await session.close()

        assert session.terminated

    async def test_start_twice_raises(self, session):
        with pytest.raises(RuntimeError):
            session.start()
