"""Application services - use case implementations."""

from .connection_bridge import DELETE_ON_CLOSE_CODE, ConnectionBridge
from .session import TERMINATION_NOTICE, Attachment, Session
from .session_registry import DEFAULT_SESSION_NAME, SessionRegistry

__all__ = [
    "Attachment",
    "ConnectionBridge",
    "DEFAULT_SESSION_NAME",
    "DELETE_ON_CLOSE_CODE",
    "Session",
    "SessionRegistry",
    "TERMINATION_NOTICE",
]
