"""Configuration infrastructure - shell detection."""

from .shell_detector import ShellDetector

__all__ = ["ShellDetector"]
