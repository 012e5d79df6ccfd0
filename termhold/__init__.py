"""termhold - persistent remote terminal sessions over WebSocket."""

__version__ = "0.1.0"
