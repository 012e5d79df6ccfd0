"""Session lifecycle states."""

from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of a session.

    RUNNING and ATTACHED alternate freely; TERMINATED is final and is only
    reached when the PTY process goes away.
    """

    RUNNING = "running"
    ATTACHED = "attached"
    TERMINATED = "terminated"
