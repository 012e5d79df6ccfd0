"""Dependency container - holds all wired dependencies."""

from dataclasses import dataclass

from termhold.application.services import ConnectionBridge, SessionRegistry
from termhold.config import Config
from termhold.domain import LaunchSpec, PTYFactory
from termhold.pty import EnvironmentCustomizer


@dataclass(frozen=True)
class Container:
    """Immutable dependency container.

    All dependencies are wired at startup and cannot be modified.
    """

    # Services
    session_registry: SessionRegistry
    connection_bridge: ConnectionBridge

    # Collaborators
    customizer: EnvironmentCustomizer
    pty_factory: PTYFactory

    # Configuration
    config: Config
    launch_spec: LaunchSpec

    # Working directory
    cwd: str | None = None

    @property
    def server_host(self) -> str:
        return self.config.server.host

    @property
    def server_port(self) -> int:
        return self.config.server.port
