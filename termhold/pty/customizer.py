"""Shell launch customization without touching the user's rc files.

Extra PATH entries and a custom prompt are applied through a dedicated rc
file that sources the user's own rc first: ``--rcfile`` for bash and a
``ZDOTDIR`` for zsh. Files are named after a hash of their content, so
identical input always yields the identical launch spec.
"""

import hashlib
import logging
import os
import shlex
import tempfile
from collections.abc import Sequence
from pathlib import Path

from termhold.domain import LaunchSpec

logger = logging.getLogger(__name__)

RC_HEADER = "# Generated by termhold for terminal sessions; do not edit."
LOGIN_FLAGS = ("--login", "-l")


def shell_kind(shell: str) -> str:
    """Classify a shell path as "bash", "zsh" or "other"."""
    base = os.path.basename(shell)
    if "zsh" in base:
        return "zsh"
    if "bash" in base:
        return "bash"
    return "other"


def default_flags(shell: str) -> list[str]:
    """Flags used when none are configured."""
    if shell_kind(shell) == "other":
        return ["-i"]
    return ["--login", "-i"]


def replace_login_with_rcfile(flags: Sequence[str], rc_file: str) -> list[str]:
    """Swap ``--login``/``-l`` for ``--rcfile <rc_file>``, or prepend it when absent."""
    result: list[str] = []
    replaced = False
    for flag in flags:
        if flag in LOGIN_FLAGS:
            result.extend(["--rcfile", rc_file])
            replaced = True
            continue
        result.append(flag)
    if not replaced:
        result = ["--rcfile", rc_file, *result]
    return result


def build_rc_content(user_rc: str, extra_paths: Sequence[str], prompt: str | None) -> str:
    """Rc script that sources ``$HOME/<user_rc>`` and then applies our settings."""
    lines = [RC_HEADER]
    if user_rc == ".zshrc":
        # Later zsh startup files and plugins should see the user's real ZDOTDIR
        lines.append('ZDOTDIR="$HOME"')
    lines.append(f'[ -f "$HOME/{user_rc}" ] && . "$HOME/{user_rc}"')
    if extra_paths:
        lines.append(f'export PATH="$PATH":{shlex.quote(os.pathsep.join(extra_paths))}')
    if prompt:
        lines.append(f"PS1={shlex.quote(prompt)}")
    return "\n".join(lines) + "\n"


class EnvironmentCustomizer:
    """Turn shell settings into a concrete LaunchSpec."""

    def __init__(self, rc_dir: Path | str | None = None) -> None:
        self._rc_dir = Path(rc_dir) if rc_dir else Path(tempfile.gettempdir()) / "termhold-rc"

    @property
    def rc_dir(self) -> Path:
        return self._rc_dir

    def prepare(
        self,
        shell: str = "bash",
        flags: Sequence[str] | None = None,
        extra_paths: Sequence[str] = (),
        prompt: str | None = None,
    ) -> LaunchSpec:
        """Build argv and environment additions for one shell launch.

        Args:
            shell: Shell name or path.
            flags: Shell flags; None selects default_flags(shell).
            extra_paths: Directories appended to PATH.
            prompt: Optional PS1 value.

        Returns:
            LaunchSpec for the PTY factory.
        """
        argv_flags = list(flags) if flags is not None else default_flags(shell)
        extra = tuple(p for p in extra_paths if p)
        env: dict[str, str] = {}
        if prompt:
            env["PS1"] = prompt

        kind = shell_kind(shell)
        try:
            if kind == "zsh":
                env["ZDOTDIR"] = str(self._write_zsh_rc(extra, prompt))
            elif kind == "bash":
                rc_file = self._write_bash_rc(extra, prompt)
                argv_flags = replace_login_with_rcfile(argv_flags, str(rc_file))
        except OSError as e:
            logger.warning("Could not write rc file, launching plain shell shell=%s error=%s", shell, e)

        return LaunchSpec(argv=(shell, *argv_flags), env=env, extra_paths=extra)

    def _write_bash_rc(self, extra_paths: Sequence[str], prompt: str | None) -> Path:
        content = build_rc_content(".bashrc", extra_paths, prompt)
        path = self._rc_dir / f"bashrc-{_digest(content)}"
        _write_if_changed(path, content)
        return path

    def _write_zsh_rc(self, extra_paths: Sequence[str], prompt: str | None) -> Path:
        content = build_rc_content(".zshrc", extra_paths, prompt)
        zdotdir = self._rc_dir / f"zsh-{_digest(content)}"
        _write_if_changed(zdotdir / ".zshrc", content)
        return zdotdir


def _digest(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]


def _write_if_changed(path: Path, content: str) -> None:
    if path.exists() and path.read_text(encoding="utf-8") == content:
        return
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    tmp = path.with_name(f"{path.name}.{os.getpid()}.tmp")
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, path)
