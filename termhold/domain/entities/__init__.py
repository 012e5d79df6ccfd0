"""Domain entities."""

from .scrollback import SCROLLBACK_MAX_BYTES, ScrollbackBuffer

__all__ = [
    "ScrollbackBuffer",
    "SCROLLBACK_MAX_BYTES",
]
