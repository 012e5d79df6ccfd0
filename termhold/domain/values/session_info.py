"""Read-only session snapshots for the management surface."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class SessionInfo:
    """Point-in-time view of one session.

    ``connected`` reflects attachment state when the snapshot was taken only.
    """

    id: str
    name: str
    cwd: str
    created_at: datetime
    connected: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cwd": self.cwd,
            "created_at": self.created_at.isoformat(timespec="seconds"),
            "connected": self.connected,
        }


@dataclass(frozen=True, slots=True)
class SessionPage:
    """One page of the session inventory."""

    page: int
    page_size: int
    total: int
    sessions: list[SessionInfo] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessions": [info.to_dict() for info in self.sessions],
            "page": self.page,
            "page_size": self.page_size,
            "total": self.total,
            "total_pages": self.total_pages,
        }
