"""PTY process management."""

from .backend import PtyProcessBackend
from .customizer import EnvironmentCustomizer, default_flags, shell_kind
from .env import build_environment, merge_path, well_known_paths

__all__ = [
    "PtyProcessBackend",
    "EnvironmentCustomizer",
    "default_flags",
    "shell_kind",
    "build_environment",
    "merge_path",
    "well_known_paths",
]
