"""
Configuration management
"""

import copy
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List

import yaml

from .errors import ConfigError
from .models import TrackedShow
from .selector import DEFAULT_PREFERENCES, LAST_MATCH, POLICIES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "~/.eztvupdate.yaml"


@dataclass
class Config:
    """Application configuration"""

    transmission_url: str = "http://localhost:9091"
    transmission_user: str = "admin"
    transmission_password: str = ""
    default_path: str = "~/eztv"
    catalog_url: str = "https://eztv.ag"
    # Quality selection
    quality_preferences: list = field(
        default_factory=lambda: list(DEFAULT_PREFERENCES)
    )
    quality_policy: str = LAST_MATCH  # "last-match" or "priority"
    # Concurrency and network
    max_workers: int = 4
    request_timeout: float = 30.0
    log_level: str = "INFO"
    shows: List[TrackedShow] = field(default_factory=list)
    # Settings as loaded, before environment or command line overrides
    _saved: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._saved = {
            f.name: copy.deepcopy(getattr(self, f.name))
            for f in fields(self)
            if f.init and f.name != "shows"
        }
        self.default_path = os.path.expanduser(self.default_path)
        self.shows = [
            s if isinstance(s, TrackedShow) else TrackedShow(**s) for s in self.shows or []
        ]
        if self.quality_policy not in POLICIES:
            raise ConfigError(
                f"Invalid quality_policy {self.quality_policy!r}, "
                f"expected one of {', '.join(POLICIES)}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        known = {f.name for f in fields(cls) if f.init}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a YAML file, defaults when it is missing"""
        if not config_path.exists():
            logger.info(f"No configuration file at {config_path}, using defaults")
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(
                f"Error while parsing configuration file {config_path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {config_path} is not a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_env_and_file(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file and/or environment variables"""
        config = cls.from_file(config_path) if config_path else cls()

        # Environment variables take priority
        if os.getenv("TRANSMISSION_URL"):
            config.transmission_url = os.getenv("TRANSMISSION_URL")
        if os.getenv("TRANSMISSION_USER"):
            config.transmission_user = os.getenv("TRANSMISSION_USER")
        if os.getenv("TRANSMISSION_PASSWORD"):
            config.transmission_password = os.getenv("TRANSMISSION_PASSWORD")
        if os.getenv("TVUPDATE_DEFAULT_PATH"):
            config.default_path = os.path.expanduser(os.getenv("TVUPDATE_DEFAULT_PATH"))

        return config

    def find_tracked(self, query: str) -> List[TrackedShow]:
        """Tracked shows whose title or URL equals query"""
        return [s for s in self.shows if query in (s.title, s.url)]

    def track(self, title: str, url: str) -> TrackedShow:
        """Append a show to the tracked list unless its URL is already there"""
        for show in self.shows:
            if show.url == url:
                return show
        show = TrackedShow(title=title, url=url)
        self.shows.append(show)
        return show

    def deduplicated_shows(self, warn: bool = False) -> List[TrackedShow]:
        """Tracked shows unique by URL (later entries win), sorted by title"""
        by_url: dict[str, TrackedShow] = {}
        for show in self.shows:
            if warn and show.url in by_url:
                logger.warning(f"Warning: duplicate entry {show.url}")
            by_url[show.url] = show
        return sorted(by_url.values(), key=lambda s: s.title)

    def to_file(self, config_path: Path):
        """
        Save configuration to a YAML file, keeping its permissions

        Settings are written as they were loaded, only the tracked show
        list is updated.
        """
        self.shows = self.deduplicated_shows(warn=True)
        data = dict(self._saved)
        data["shows"] = [s.to_dict() for s in self.shows]

        mode = 0o644
        if config_path.exists():
            mode = config_path.stat().st_mode & 0o777

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                data, f, default_flow_style=False, allow_unicode=True, sort_keys=False
            )
        os.chmod(config_path, mode)
