"""Configuration loading and validation using Pydantic."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from termhold.domain import (
    DEFAULT_COLS,
    DEFAULT_ROWS,
    MAX_COLS,
    MAX_ROWS,
    MIN_COLS,
    MIN_ROWS,
    SCROLLBACK_MAX_BYTES,
)

DEFAULT_CONFIG_PATH = "termhold.yaml"


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class TerminalConfig(BaseModel):
    """Terminal configuration.

    Empty ``shell`` and ``shell_flags`` mean auto-detect.
    """

    shell: str = ""
    shell_flags: list[str] = Field(default_factory=list)
    extra_paths: list[str] = Field(default_factory=list)
    ps1: str | None = None
    cols: int = Field(default=DEFAULT_COLS, ge=MIN_COLS, le=MAX_COLS)
    rows: int = Field(default=DEFAULT_ROWS, ge=MIN_ROWS, le=MAX_ROWS)
    scrollback_bytes: int = Field(default=SCROLLBACK_MAX_BYTES, ge=1024)
    reset_on_replay: bool = False
    cwd: str | None = None

    @field_validator("extra_paths")
    @classmethod
    def strip_empty_paths(cls, v: list[str]) -> list[str]:
        return [p.strip() for p in v if p and p.strip()]

    @field_validator("cwd")
    @classmethod
    def validate_cwd(cls, v: str | None) -> str | None:
        if v is None:
            return None
        path = Path(v).expanduser()
        if not path.is_dir():
            raise ValueError(f"Working directory not found: {v}")
        return str(path)


class Config(BaseModel):
    """Application configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    terminal: TerminalConfig = Field(default_factory=TerminalConfig)


def load_config(config_path: Path | str = DEFAULT_CONFIG_PATH) -> Config:
    """Load configuration from a YAML file.

    A missing or empty file yields the defaults.

    Raises:
        ValueError: The document root is not a mapping, or a value is invalid.
    """
    path = Path(config_path).expanduser()
    data = yaml.safe_load(path.read_text(encoding="utf-8")) if path.is_file() else None

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    return Config.model_validate(data)
