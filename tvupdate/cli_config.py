"""
CLI configuration handler
"""

import logging
import os
import sys
from pathlib import Path

from rich.console import Console

from .config import DEFAULT_CONFIG_FILE, Config
from .errors import ConfigError, TransportError
from .eztv import EztvClient
from .transmission import TransmissionClient

logger = logging.getLogger(__name__)
console = Console()


def resolve_config_path(config_file: str | None) -> Path:
    """Path of the configuration file, expanding ~"""
    return Path(os.path.expanduser(config_file or DEFAULT_CONFIG_FILE))


def load_config_from_args(config_file: str | None, log_level: str | None) -> Config:
    """
    Load configuration from CLI arguments and files

    Args:
        config_file: Path to config file (default ~/.eztvupdate.yaml)
        log_level: Log level overriding the file's

    Returns:
        Config object

    Raises:
        SystemExit if configuration is invalid
    """
    try:
        cfg = Config.from_env_and_file(resolve_config_path(config_file))
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)

    if log_level:
        cfg.log_level = log_level
    return cfg


def connect_transmission(config: Config) -> TransmissionClient:
    """
    Connect to Transmission and return client

    Args:
        config: Configuration object

    Returns:
        TransmissionClient instance

    Raises:
        SystemExit if connection fails
    """
    try:
        return TransmissionClient(
            config.transmission_url,
            config.transmission_user,
            config.transmission_password,
            timeout=config.request_timeout,
        ).connect()
    except TransportError as e:
        console.print(f"[red]Transmission connection failed:[/red] {e}")
        console.print("\nPlease verify:")
        console.print("  - Transmission URL is correct (with port)")
        console.print("  - User and password are valid (TRANSMISSION_PASSWORD)")
        console.print("  - Transmission is accessible from your machine")
        sys.exit(1)


def save_config(config: Config, config_path: Path, dry_run: bool = False) -> None:
    """Write the configuration back, unless running dry"""
    if dry_run:
        logger.info("SaveConfig: not writing file because --dry-run was used")
        return
    try:
        config.to_file(config_path)
    except OSError as e:
        console.print(f"[red]Unable to save configuration:[/red] {e}")
        logger.exception("Error while saving configuration")
        sys.exit(1)


def setup_context(config: Config, config_path: Path) -> dict:
    """
    Setup CLI context with config and catalog client

    Transmission is connected lazily, only by commands that enqueue.

    Args:
        config: Configuration object
        config_path: Where the configuration is saved back

    Returns:
        Dictionary with context objects
    """
    return {
        "config": config,
        "config_path": config_path,
        "catalog": EztvClient(config.catalog_url, timeout=config.request_timeout),
    }
