"""PTY backend built on ptyprocess (POSIX)."""

import errno
import logging
import os
import signal
from collections.abc import Mapping, Sequence
from contextlib import suppress

from ptyprocess import PtyProcess, PtyProcessError

from termhold.domain import ProcessSpawnError, TerminalDimensions

logger = logging.getLogger(__name__)


class PtyProcessBackend:
    """PTYPort implementation wrapping a ptyprocess child."""

    def __init__(self, process: PtyProcess, dimensions: TerminalDimensions) -> None:
        self._process = process
        self._dimensions = dimensions

    @classmethod
    def spawn(
        cls,
        argv: Sequence[str],
        env: Mapping[str, str],
        cwd: str,
        dimensions: TerminalDimensions,
    ) -> "PtyProcessBackend":
        """Start ``argv`` on a new PTY.

        Raises:
            ProcessSpawnError: The executable is missing or could not be started.
        """
        try:
            process = PtyProcess.spawn(
                list(argv),
                cwd=cwd,
                env=dict(env),
                dimensions=(dimensions.rows, dimensions.cols),
            )
        except (OSError, PtyProcessError) as e:
            raise ProcessSpawnError(f"start pty: {e}") from e

        # Reads and writes wait on the event loop, never on the descriptor
        os.set_blocking(process.fd, False)
        logger.debug("PTY spawned pid=%d argv=%s", process.pid, list(argv))
        return cls(process, dimensions)

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def dimensions(self) -> TerminalDimensions:
        return self._dimensions

    def fileno(self) -> int:
        return self._process.fd

    def read(self, size: int = 4096) -> bytes:
        try:
            data = os.read(self._process.fd, size)
        except OSError as e:
            # Linux reports a hung-up PTY as EIO
            if e.errno == errno.EIO:
                raise EOFError("PTY closed") from e
            raise
        if not data:
            raise EOFError("PTY closed")
        return data

    def write(self, data: bytes) -> int:
        """Write what the input queue accepts now; BlockingIOError when it is full."""
        return os.write(self._process.fd, data)

    def resize(self, dimensions: TerminalDimensions) -> None:
        self._process.setwinsize(dimensions.rows, dimensions.cols)
        self._dimensions = dimensions

    def is_alive(self) -> bool:
        if self._process.closed:
            return False
        return self._process.isalive()

    def kill(self) -> None:
        with suppress(ProcessLookupError):
            self._process.kill(signal.SIGKILL)

    def close(self) -> None:
        self._process.close(force=True)
