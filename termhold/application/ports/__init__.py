"""Application layer ports - interfaces for presentation layer."""

from .connection_port import ConnectionClosed, ConnectionPort

__all__ = [
    "ConnectionPort",
    "ConnectionClosed",
]
