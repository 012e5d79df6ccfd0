"""Shell detection for available shells on the system."""

import os
import shutil
from pathlib import Path


class ShellDetector:
    """Detect and resolve login shells on the current platform."""

    # (name, command) in order of preference
    CANDIDATES: tuple[tuple[str, str], ...] = (
        ("Bash", "bash"),
        ("Zsh", "zsh"),
        ("Fish", "fish"),
        ("Sh", "sh"),
    )

    def detect_shells(self) -> dict[str, str]:
        """Auto-detect available shells.

        Returns:
            Mapping of shell command name to resolved executable path.
        """
        shells = {}
        for _, command in self.CANDIDATES:
            path = self.resolve(command)
            if path:
                shells[command] = path
        return shells

    def resolve(self, shell: str) -> str | None:
        """Resolve a shell name or path to an executable path."""
        if os.sep in shell:
            path = Path(shell)
            if path.is_file() and os.access(path, os.X_OK):
                return str(path)
            return None
        return shutil.which(shell)

    def get_default_shell(self) -> str:
        """Get the default shell command: bash, then zsh, then sh."""
        for command in ("bash", "zsh"):
            if shutil.which(command):
                return command
        return "sh"
