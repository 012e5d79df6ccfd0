"""PTY port - interface for pseudo-terminal backends."""

from collections.abc import Callable
from typing import Protocol

from ..values import LaunchSpec, TerminalDimensions


class PTYPort(Protocol):
    """One spawned process attached to the slave side of a PTY.

    The owning session is the only reader (its output pump) and serializes
    all writes, so implementations need no locking of their own.
    """

    def fileno(self) -> int:
        """Non-blocking master file descriptor the session polls."""
        ...

    def read(self, size: int = 4096) -> bytes:
        """Read available output without blocking.

        Raises BlockingIOError when nothing is pending and EOFError once
        the PTY is gone.
        """
        ...

    def write(self, data: bytes) -> int:
        """Write input without blocking and return the byte count accepted.

        Raises BlockingIOError while the terminal input queue is full.
        """
        ...

    def resize(self, dimensions: TerminalDimensions) -> None:
        """Set the PTY window size."""
        ...

    def is_alive(self) -> bool:
        ...

    def kill(self) -> None:
        """Forcefully terminate the process. Safe on a dead process."""
        ...

    def close(self) -> None:
        """Reap the process and release the master descriptor."""
        ...

    @property
    def dimensions(self) -> TerminalDimensions:
        ...


# Spawns a process for the launch spec in the given working directory.
# Raises ProcessSpawnError when the process cannot be started.
PTYFactory = Callable[[LaunchSpec, str, TerminalDimensions], PTYPort]
