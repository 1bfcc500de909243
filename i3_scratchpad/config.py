"""Runtime settings read from the environment.

Settings are validated with pydantic so a typo in an exported variable
fails loudly instead of silently falling back to a default.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import (
    DEFAULT_IPC_TIMEOUT,
    DEFAULT_LOGS_PATH,
    ENV_CONFIG_DIR,
    ENV_IPC_TIMEOUT,
    ENV_LOGS_LEVEL,
    ENV_LOGS_PATH,
    ENV_SOCKET,
    STICKY_REGISTRY_FILENAME,
)
from .errors import ConfigurationError


LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


def default_config_dir() -> Path:
    """Per-user configuration directory (XDG aware)."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "i3-scratchpad"


class ScratchpadSettings(BaseModel):
    """Settings for logging, IPC and the sticky registry."""

    logs_path: Path = Field(DEFAULT_LOGS_PATH, description="Log file path")
    logs_level: Optional[str] = Field(None, description="DEBUG, INFO, WARN or ERROR; unset disables logging")
    socket_path: Optional[str] = Field(None, description="Override for the i3/sway IPC socket")
    ipc_timeout: float = Field(DEFAULT_IPC_TIMEOUT, gt=0, description="IPC socket timeout in seconds")
    config_dir: Path = Field(default_factory=default_config_dir, description="Directory holding the sticky registry")

    @field_validator("logs_level")
    @classmethod
    def validate_logs_level(cls, v: Optional[str]) -> Optional[str]:
        """Normalize the level name; blank means disabled."""
        if v is None or not v.strip():
            return None
        level = v.strip().upper()
        if level == "WARNING":
            level = "WARN"
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("socket_path")
    @classmethod
    def validate_socket_path(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def registry_path(self) -> Path:
        return self.config_dir / STICKY_REGISTRY_FILENAME

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ScratchpadSettings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Validated settings

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        mapping = {
            "logs_path": ENV_LOGS_PATH,
            "logs_level": ENV_LOGS_LEVEL,
            "socket_path": ENV_SOCKET,
            "ipc_timeout": ENV_IPC_TIMEOUT,
            "config_dir": ENV_CONFIG_DIR,
        }
        values = {field: env[var] for field, var in mapping.items() if env.get(var)}

        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][0]) if first.get("loc") else "settings"
            raise ConfigurationError(mapping.get(field, field), first["msg"]) from e
