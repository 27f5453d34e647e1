"""Configuration loader for notestore.toml."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "notestore.toml"

ENV_DSN = "NOTESTORE_DSN"
ENV_LOG_LEVEL = "NOTESTORE_LOG_LEVEL"


@dataclass
class ServerConfig:
    """Shutdown behaviour; the listen address comes from the command line."""
    graceful_timeout: float = 10.0


@dataclass
class StoreConfig:
    """Backend selection; no dsn means the in-memory store."""
    dsn: str | None = None
    timeout: float = 5.0
    pool_size: int = 5


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class NotesConfig:
    """Complete notestore configuration."""
    server: ServerConfig = field(default_factory=ServerConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Path | None = None) -> NotesConfig:
    """
    Load configuration from notestore.toml and the environment.

    Search order:
    1. config_path (if provided)
    2. cwd/notestore.toml

    NOTESTORE_DSN and NOTESTORE_LOG_LEVEL override the file.

    Args:
        config_path: Explicit path to config file

    Returns:
        NotesConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILENAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    server_data = toml_data.get("server", {})
    server_config = ServerConfig(
        graceful_timeout=float(server_data.get("graceful_timeout", 10.0)),
    )

    store_data = toml_data.get("store", {})
    store_config = StoreConfig(
        dsn=store_data.get("dsn") or None,
        timeout=float(store_data.get("timeout", 5.0)),
        pool_size=int(store_data.get("pool_size", 5)),
    )

    logging_data = toml_data.get("logging", {})
    logging_config = LoggingConfig(level=str(logging_data.get("level", "INFO")).upper())

    # Environment wins over the file
    env_dsn = os.environ.get(ENV_DSN, "").strip()
    if env_dsn:
        store_config.dsn = env_dsn
    env_level = os.environ.get(ENV_LOG_LEVEL, "").strip()
    if env_level:
        logging_config.level = env_level.upper()

    return NotesConfig(
        server=server_config,
        store=store_config,
        logging=logging_config,
    )
