"""Configuration management for remsh.

Loads settings from a YAML configuration file with environment variable
overrides (``REMSH_SERVER__PORT=9000`` and so on). Supports .env files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/remsh.yaml")

# Reference limits: one command line / one response, and the token slots
# of an argument list (the last slot used to hold the terminator).
DEFAULT_BUFFER_SIZE = 1024
DEFAULT_MAX_ARGS = 10
DEFAULT_PORT = 8080


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0", description="Interface to bind (all by default)")
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535, description="0 picks a free port")
    backlog: int | None = Field(
        default=None, gt=0, description="listen() backlog, socket.SOMAXCONN if unset"
    )
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, ge=2)
    max_args: int = Field(default=DEFAULT_MAX_ARGS, ge=2)
    accept_poll_interval: float = Field(
        default=1.0, gt=0, description="Seconds between shutdown checks while idle in accept()"
    )


class ClientConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, ge=2)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for remsh.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "REMSH_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: init values (YAML) > env vars > .env file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
