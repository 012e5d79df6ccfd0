"""Session registry - create, look up, list and remove sessions."""

import asyncio
import itertools
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path

from termhold.domain import (
    SCROLLBACK_MAX_BYTES,
    InvalidWorkingDirectory,
    LaunchSpec,
    ProcessSpawnError,
    PTYFactory,
    SessionId,
    SessionInfo,
    SessionPage,
    TerminalDimensions,
)

from .session import MAX_PENDING_FRAMES, Session

logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "Terminal"
DEFAULT_PAGE_SIZE = 20


class SessionRegistry:
    """In-memory table of sessions keyed by a monotonic ID.

    One instance is built by the composition root and passed around;
    tests build as many independent registries as they need.
    """

    def __init__(
        self,
        pty_factory: PTYFactory,
        launch_builder: Callable[[], LaunchSpec],
        *,
        default_cwd: str | None = None,
        dimensions: TerminalDimensions | None = None,
        scrollback_bytes: int = SCROLLBACK_MAX_BYTES,
        replay_prefix: bytes = b"",
        max_pending: int = MAX_PENDING_FRAMES,
    ) -> None:
        self._pty_factory = pty_factory
        self._launch_builder = launch_builder
        self._default_cwd = default_cwd
        self._dimensions = dimensions or TerminalDimensions.default()
        self._scrollback_bytes = scrollback_bytes
        self._replay_prefix = replay_prefix
        self._max_pending = max_pending

        self._lock = threading.Lock()
        self._sessions: dict[SessionId, Session] = {}
        self._sequence = itertools.count(1)
        self._exit_tasks: set[asyncio.Task[bool]] = set()

    async def create(self, name: str = DEFAULT_SESSION_NAME, cwd: str | None = None) -> Session:
        """Spawn a shell and register a new session.

        Raises:
            InvalidWorkingDirectory: ``cwd`` is missing or not a directory.
            ProcessSpawnError: The PTY process could not be started.
        """
        workdir = self._resolve_cwd(cwd)
        launch = self._launch_builder()

        try:
            pty_handle = self._pty_factory(launch, workdir, self._dimensions)
        except ProcessSpawnError:
            logger.warning("PTY spawn failed argv=%s cwd=%s", launch.argv, workdir)
            raise
        except OSError as e:
            logger.warning("PTY spawn failed argv=%s cwd=%s error=%s", launch.argv, workdir, e)
            raise ProcessSpawnError(f"start pty: {e}") from e

        with self._lock:
            session_id = SessionId.from_sequence(next(self._sequence))
            session = Session(
                session_id,
                name or DEFAULT_SESSION_NAME,
                workdir,
                pty_handle,
                scrollback_bytes=self._scrollback_bytes,
                replay_prefix=self._replay_prefix,
                max_pending=self._max_pending,
            )
            self._sessions[session_id] = session
        session.start(on_exit=self._on_session_exit)

        logger.info(
            "Session created session_id=%s name=%s cwd=%s argv=%s",
            session_id,
            session.name,
            workdir,
            launch.argv,
        )
        return session

    def get(self, session_id: SessionId | str) -> Session | None:
        """Look up a session. Never creates one."""
        key = session_id if isinstance(session_id, SessionId) else SessionId(session_id)
        with self._lock:
            return self._sessions.get(key)

    def list(self) -> list[SessionInfo]:
        """Best-effort snapshot of all sessions in creation order."""
        with self._lock:
            sessions = list(self._sessions.values())
        return [session.info() for session in sessions]

    def list_page(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> SessionPage:
        """One page of the inventory; pages past the end are empty."""
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be positive")

        infos = self.list()
        start = (page - 1) * page_size
        return SessionPage(
            page=page,
            page_size=page_size,
            total=len(infos),
            sessions=infos[start : start + page_size],
        )

    async def remove(self, session_id: SessionId | str) -> bool:
        """Remove a session, killing its process. Returns False if it was absent."""
        key = session_id if isinstance(session_id, SessionId) else SessionId(session_id)
        with self._lock:
            session = self._sessions.pop(key, None)

        if session is None:
            return False

        await session.close()
        logger.info("Session removed session_id=%s", key)
        return True

    async def close_all(self) -> None:
        """Remove every session (server shutdown)."""
        with self._lock:
            session_ids = list(self._sessions)
        for session_id in session_ids:
            await self.remove(session_id)
        if self._exit_tasks:
            await asyncio.wait(set(self._exit_tasks))

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, session_id: object) -> bool:
        if not isinstance(session_id, SessionId | str) or not session_id:
            return False
        return self.get(session_id) is not None

    def _resolve_cwd(self, cwd: str | None) -> str:
        workdir = cwd or self._default_cwd or os.getcwd()
        if not Path(workdir).is_dir():
            raise InvalidWorkingDirectory(workdir)
        return workdir

    def _on_session_exit(self, session: Session) -> None:
        """Remove a session whose process went away on its own."""
        task = asyncio.get_running_loop().create_task(self.remove(session.id))
        self._exit_tasks.add(task)
        task.add_done_callback(self._exit_tasks.discard)
