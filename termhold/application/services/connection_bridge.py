"""Connection bridge - relays one client connection to a session."""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

from termhold.domain import SessionCreateError, TerminalDimensions

from ..ports.connection_port import ConnectionClosed, ConnectionPort
from .session import Attachment, Session
from .session_registry import DEFAULT_SESSION_NAME, SessionRegistry

logger = logging.getLogger(__name__)

# Client close code asking for the session to be deleted with the connection
DELETE_ON_CLOSE_CODE = 4000

# Larger input frames are rejected with an error message
MAX_INPUT_SIZE = 1024 * 1024


@dataclass
class _ReadResult:
    close_code: int | None = None
    delete_requested: bool = False


def parse_control(text: str) -> dict[str, Any] | None:
    """Return the control message in a text frame, or None for plain input."""
    try:
        message = json.loads(text)
    except ValueError:
        return None
    if not isinstance(message, dict) or not isinstance(message.get("type"), str):
        return None
    if not message["type"]:
        return None
    return message


class ConnectionBridge:
    """Service for relaying terminal I/O between connections and sessions.

    Each ``handle`` call serves one connection from attach until the
    connection or the session ends.
    """

    def __init__(self, registry: SessionRegistry, max_input_size: int = MAX_INPUT_SIZE) -> None:
        self._registry = registry
        self._max_input_size = max_input_size

    async def handle(
        self,
        connection: ConnectionPort,
        session_id: str | None = None,
        name: str | None = None,
        cwd: str | None = None,
    ) -> None:
        """Serve one connection.

        Args:
            connection: Client connection.
            session_id: ID to reconnect to; unknown or missing IDs create a session.
            name: Display name for a newly created session.
            cwd: Working directory for a newly created session.
        """
        session = self._registry.get(session_id) if session_id else None

        if session is None:
            try:
                session = await self._registry.create(name or DEFAULT_SESSION_NAME, cwd)
            except SessionCreateError as e:
                logger.warning("Session create failed session_id=%s error=%s", session_id, e)
                await connection.send_text(f"Error: {e}")
                await connection.close()
                return
            await connection.send_message({"type": "session_id", "session_id": str(session.id)})
        else:
            logger.info("Reconnecting session_id=%s", session.id)

        attachment = await session.attach(connection)
        await self._relay(session, attachment, connection)

    async def _relay(
        self,
        session: Session,
        attachment: Attachment,
        connection: ConnectionPort,
    ) -> None:
        """Run the input loop until the connection, the attachment or the session ends."""
        result = _ReadResult()
        read_task = asyncio.create_task(self._input_loop(session, connection, result))
        exit_task = asyncio.create_task(session.wait_terminated())
        ended_task = asyncio.create_task(attachment.wait_ended())
        tasks = {read_task, exit_task, ended_task}

        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.wait(tasks)

        if session.terminated:
            # Process exited: the session goes, never just detached
            await self._registry.remove(session.id)
            await attachment.close(flush=True)
            logger.info("Session ended while attached session_id=%s", session.id)
            return

        if result.close_code == DELETE_ON_CLOSE_CODE or result.delete_requested:
            logger.info(
                "Client requested deletion session_id=%s close_code=%s",
                session.id,
                result.close_code,
            )
            await self._registry.remove(session.id)
            return

        session.detach(attachment)
        await connection.close()

    async def _input_loop(
        self,
        session: Session,
        connection: ConnectionPort,
        result: _ReadResult,
    ) -> None:
        """Handle frames from the client."""
        while True:
            try:
                frame = await connection.receive()
            except ConnectionClosed as e:
                result.close_code = e.code
                return
            except Exception as e:
                logger.warning("Receive failed session_id=%s error=%s", session.id, e)
                return

            if isinstance(frame, str):
                message = parse_control(frame)
                if message is not None and message["type"] == "resize":
                    if self._handle_resize(session, message):
                        continue
                if message is not None and message["type"] == "close_delete":
                    result.delete_requested = True
                    continue
                frame = frame.encode("utf-8")

            if len(frame) > self._max_input_size:
                logger.warning("Input too large session_id=%s size=%d", session.id, len(frame))
                try:
                    await connection.send_message({"type": "error", "message": "Input too large"})
                except Exception as e:
                    logger.debug("Error reply failed session_id=%s: %s", session.id, e)
                    return
                continue

            try:
                await session.write(frame)
            except OSError as e:
                # The pump sees the same failure and drives termination
                logger.debug("PTY write failed session_id=%s: %s", session.id, e)

    def _handle_resize(self, session: Session, message: dict[str, Any]) -> bool:
        """Apply a resize message.

        Returns False when cols or rows are not integers; such a frame is
        plain input. Missing or non-positive sizes are consumed and ignored.
        """
        cols = _size(message.get("cols"))
        rows = _size(message.get("rows"))
        if not _is_int(cols) or not _is_int(rows):
            return False
        if cols <= 0 or rows <= 0:
            logger.debug("Ignoring invalid resize session_id=%s message=%s", session.id, message)
            return True

        try:
            session.resize(TerminalDimensions.clamped(cols, rows))
        except OSError as e:
            # Raced with removal; the PTY is already released
            logger.debug("PTY resize failed session_id=%s: %s", session.id, e)
        return True


def _size(value: Any) -> Any:
    # JSON null and a missing field both read as zero
    return 0 if value is None else value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
