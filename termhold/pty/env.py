"""Environment construction for PTY processes."""

import os
from collections.abc import Iterable, Mapping
from pathlib import Path

TERM = "xterm-256color"

# Common install locations that are often missing from a server's PATH
SYSTEM_TOOL_PATHS: tuple[str, ...] = (
    "/usr/local/bin",
    "/usr/local/go/bin",
)
HOME_TOOL_PATHS: tuple[str, ...] = (
    ".local/bin",
    "go/bin",
    ".bun/bin",
)


def well_known_paths(home: Path | None = None) -> list[str]:
    """Tool directories that exist on this machine.

    Returns:
        Existing directories from SYSTEM_TOOL_PATHS and HOME_TOOL_PATHS.
    """
    home = home or Path.home()
    candidates = [*SYSTEM_TOOL_PATHS, *(str(home / p) for p in HOME_TOOL_PATHS)]
    return [p for p in candidates if Path(p).is_dir()]


def merge_path(path_value: str, extra_paths: Iterable[str]) -> str:
    """Append extra entries to a PATH value, dropping empties and duplicates."""
    merged: list[str] = []
    for entry in [*path_value.split(os.pathsep), *extra_paths]:
        entry = entry.strip()
        if entry and entry not in merged:
            merged.append(entry)
    return os.pathsep.join(merged)


def build_environment(
    extra_paths: Iterable[str] = (),
    overrides: Mapping[str, str] | None = None,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the environment for a shell process.

    The server's environment is inherited so the shell behaves like one
    the user opened locally.

    Args:
        extra_paths: Entries appended to PATH.
        overrides: Variables set last (e.g. ZDOTDIR, PS1).
        base: Environment to start from, defaults to os.environ.

    Returns:
        Dictionary of environment variables.
    """
    env = dict(os.environ if base is None else base)
    env["TERM"] = TERM
    env["PATH"] = merge_path(env.get("PATH", ""), extra_paths)
    if overrides:
        env.update(overrides)
    return env
