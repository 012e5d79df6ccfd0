"""Domain ports - interfaces for infrastructure to implement."""

from .pty_port import PTYFactory, PTYPort

__all__ = [
    "PTYPort",
    "PTYFactory",
]
