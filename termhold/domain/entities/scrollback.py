"""Scrollback buffer entity for session reconnection."""

from dataclasses import dataclass, field

# Business rules
SCROLLBACK_MAX_BYTES = 256 * 1024


@dataclass
class ScrollbackBuffer:
    """Most recent ``max_bytes`` of terminal output.

    Pure data management: bytes are appended in emission order and the
    oldest are evicted first once the window is full. Nothing is ever
    reordered or duplicated.
    """

    max_bytes: int = SCROLLBACK_MAX_BYTES
    _data: bytearray = field(default_factory=bytearray)
    _total_written: int = 0

    def __post_init__(self) -> None:
        if self.max_bytes < 1:
            raise ValueError("max_bytes must be positive")

    @property
    def size(self) -> int:
        """Current buffer size in bytes."""
        return len(self._data)

    @property
    def is_empty(self) -> bool:
        return not self._data

    @property
    def total_written(self) -> int:
        """Bytes appended over the buffer's lifetime, evicted ones included."""
        return self._total_written

    def append(self, data: bytes) -> None:
        """Append a chunk, evicting the oldest bytes past the cap."""
        self._total_written += len(data)
        if len(data) >= self.max_bytes:
            self._data[:] = data[-self.max_bytes :]
            return

        self._data += data
        overflow = len(self._data) - self.max_bytes
        if overflow > 0:
            del self._data[:overflow]

    def snapshot(self) -> bytes:
        """Copy of the retained window."""
        return bytes(self._data)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
