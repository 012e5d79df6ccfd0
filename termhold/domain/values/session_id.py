"""Session identifier value object."""

from dataclasses import dataclass

SESSION_ID_PREFIX = "session-"


@dataclass(frozen=True, slots=True)
class SessionId:
    """Opaque, process-lifetime-unique session identifier."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("SessionId cannot be empty")

    @classmethod
    def from_sequence(cls, number: int) -> "SessionId":
        """Build the ID for the n-th session created by a registry."""
        return cls(f"{SESSION_ID_PREFIX}{number}")

    def __str__(self) -> str:
        return self.value
