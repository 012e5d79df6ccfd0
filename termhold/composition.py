"""Composition root - the ONLY place where dependencies are wired."""

import logging
from pathlib import Path

from termhold.application.services import ConnectionBridge, SessionRegistry
from termhold.application.services.session import REPLAY_RESET_SEQUENCE
from termhold.config import DEFAULT_CONFIG_PATH, Config, load_config
from termhold.container import Container
from termhold.domain import LaunchSpec, PTYFactory, PTYPort, TerminalDimensions
from termhold.infrastructure.config import ShellDetector
from termhold.pty import (
    EnvironmentCustomizer,
    PtyProcessBackend,
    build_environment,
    well_known_paths,
)

logger = logging.getLogger(__name__)


def create_pty_factory() -> PTYFactory:
    """Create a PTY factory spawning shells through ptyprocess."""

    def factory(launch: LaunchSpec, cwd: str, dimensions: TerminalDimensions) -> PTYPort:
        env = build_environment(launch.extra_paths, launch.env)
        return PtyProcessBackend.spawn(launch.argv, env, cwd, dimensions)

    return factory


def build_launch_spec(
    config: Config,
    customizer: EnvironmentCustomizer,
    detector: ShellDetector | None = None,
) -> LaunchSpec:
    """Resolve the configured shell into a LaunchSpec."""
    detector = detector or ShellDetector()
    terminal = config.terminal

    shell = terminal.shell or detector.get_default_shell()
    if detector.resolve(shell) is None:
        logger.warning("Configured shell not found shell=%s", shell)

    return customizer.prepare(
        shell=shell,
        flags=terminal.shell_flags or None,
        extra_paths=[*well_known_paths(), *terminal.extra_paths],
        prompt=terminal.ps1,
    )


def create_container(
    config_path: Path | str = DEFAULT_CONFIG_PATH,
    cwd: str | None = None,
    config: Config | None = None,
    pty_factory: PTYFactory | None = None,
) -> Container:
    """Create the dependency container with all wired dependencies.

    This is the composition root - the single place where all
    dependencies are created and wired together.

    Args:
        config_path: Path to config file.
        cwd: Working directory for new sessions, overrides the config.
        config: Preloaded configuration, skips reading ``config_path``.
        pty_factory: PTY factory override (tests).

    Returns:
        Fully wired dependency container.
    """
    if config is None:
        config = load_config(config_path)
    terminal = config.terminal
    effective_cwd = cwd or terminal.cwd

    customizer = EnvironmentCustomizer()
    launch_spec = build_launch_spec(config, customizer)
    pty_factory = pty_factory or create_pty_factory()

    session_registry = SessionRegistry(
        pty_factory=pty_factory,
        launch_builder=lambda: launch_spec,
        default_cwd=effective_cwd,
        dimensions=TerminalDimensions(terminal.cols, terminal.rows),
        scrollback_bytes=terminal.scrollback_bytes,
        replay_prefix=REPLAY_RESET_SEQUENCE if terminal.reset_on_replay else b"",
    )
    connection_bridge = ConnectionBridge(session_registry)

    return Container(
        session_registry=session_registry,
        connection_bridge=connection_bridge,
        customizer=customizer,
        pty_factory=pty_factory,
        config=config,
        launch_spec=launch_spec,
        cwd=effective_cwd,
    )
