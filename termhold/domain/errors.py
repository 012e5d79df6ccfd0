"""Error taxonomy for session management."""


class TermholdError(Exception):
    """Base class for all termhold errors."""


class SessionCreateError(TermholdError):
    """A session could not be created; nothing was left allocated."""


class InvalidWorkingDirectory(SessionCreateError):
    """The requested working directory is missing or not a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"invalid working directory: {path}")
        self.path = path


class ProcessSpawnError(SessionCreateError):
    """The PTY-backed shell process failed to start."""
