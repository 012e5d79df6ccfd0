"""Pure domain layer - no infrastructure dependencies."""

# Entities
from .entities import SCROLLBACK_MAX_BYTES, ScrollbackBuffer

# Errors
from .errors import (
    InvalidWorkingDirectory,
    ProcessSpawnError,
    SessionCreateError,
    TermholdError,
)

# Ports
from .ports import PTYFactory, PTYPort

# Value Objects
from .values import (
    DEFAULT_COLS,
    DEFAULT_ROWS,
    MAX_COLS,
    MAX_ROWS,
    MIN_COLS,
    MIN_ROWS,
    SESSION_ID_PREFIX,
    LaunchSpec,
    SessionId,
    SessionInfo,
    SessionPage,
    SessionState,
    TerminalDimensions,
)

__all__ = [
    # Values
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
    # Entities
    "ScrollbackBuffer",
    "SCROLLBACK_MAX_BYTES",
    # Errors
    "TermholdError",
    "SessionCreateError",
    "InvalidWorkingDirectory",
    "ProcessSpawnError",
    # Ports
    "PTYPort",
    "PTYFactory",
]
