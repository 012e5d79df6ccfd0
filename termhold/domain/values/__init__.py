"""Domain value objects - immutable data structures."""

from .launch_spec import LaunchSpec
from .session_id import SESSION_ID_PREFIX, SessionId
from .session_info import SessionInfo, SessionPage
from .session_state import SessionState
from .terminal_dimensions import (
    DEFAULT_COLS,
    DEFAULT_ROWS,
    MAX_COLS,
    MAX_ROWS,
    MIN_COLS,
    MIN_ROWS,
    TerminalDimensions,
)

__all__ = [
    "TerminalDimensions",
    "MIN_COLS",
    "MAX_COLS",
    "MIN_ROWS",
    "MAX_ROWS",
    "DEFAULT_COLS",
    "DEFAULT_ROWS",
    "SessionId",
    "SESSION_ID_PREFIX",
    "SessionInfo",
    "SessionPage",
    "SessionState",
    "LaunchSpec",
]
