"""Connection port - interface for network connections."""

from typing import Any, Protocol


class ConnectionClosed(Exception):
    """Raised by ``receive`` once the peer has gone away."""

    def __init__(self, code: int | None = None) -> None:
        super().__init__(f"connection closed (code={code})")
        self.code = code


class ConnectionPort(Protocol):
    """Protocol for one client connection.

    Presentation layer implements this (e.g. FastAPIWebSocketAdapter).
    Frames are either text (``str``) or binary (``bytes``).
    """

    async def send_output(self, data: bytes) -> None:
        """Send raw terminal output as a binary frame."""
        ...

    async def send_text(self, text: str) -> None:
        """Send a text frame."""
        ...

    async def send_message(self, message: dict[str, Any]) -> None:
        """Send a JSON control message as a text frame."""
        ...

    async def receive(self) -> bytes | str:
        """Receive the next frame. Raises ConnectionClosed on disconnect."""
        ...

    async def close(self, code: int = 1000) -> None:
        """Close the connection. Safe to call more than once."""
        ...

    def is_connected(self) -> bool:
        ...
