"""
Data models for tvupdate
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from .utils import format_size


@dataclass
class Episode:
    """Represents one release of an episode listed on the catalog"""

    show_title: str
    season: int
    episode: int
    title: str
    size: str = ""
    release: str = ""
    torrent_url: str = ""
    magnet_url: str = ""
    episode_url: str = ""
    show_url: str = ""
    downloaded: bool = False
    path: str | None = None

    def __str__(self) -> str:
        return (
            f"S{self.season:02d} E{self.episode:02d} - {self.title} - "
            f"({self.size}) ({self.release})"
        )

    @property
    def slot(self) -> tuple[int, int]:
        return (self.season, self.episode)

    @property
    def locator(self) -> str:
        """Magnet link when available, torrent URL otherwise"""
        return self.magnet_url or self.torrent_url

    @property
    def filename(self) -> str:
        """
        Name of the file this release produces once downloaded

        The torrent URL ends with the release file name plus ".torrent",
        dropping the last extension gives back the video file name.
        """
        base = os.path.basename(self.torrent_url)
        stem, _ = os.path.splitext(base)
        return stem

    def expected_path(self, base_dir: str) -> str:
        """Path the release would have once stored under base_dir"""
        return os.path.join(
            base_dir, self.show_title, f"S{self.season:02d}", self.filename
        )


@dataclass
class Show:
    """Represents a show page on the catalog"""

    title: str
    url: str
    rating: str = ""
    episodes: List[Episode] = field(default_factory=list)

    def __str__(self) -> str:
        return f"\nTitle:  {self.title}\nURL:    {self.url}\nRating: {self.rating}"

    def sort_episodes(self) -> None:
        """Sort episodes by season, then episode (stable)"""
        self.episodes.sort(key=lambda e: e.slot)


@dataclass
class LocalFile:
    """An episode file found on local storage"""

    season: int
    episode: int
    path: str


@dataclass
class TrackedShow:
    """A show saved in the configuration file"""

    title: str
    url: str
    path: str | None = None

    def to_dict(self) -> dict:
        data = {"title": self.title, "url": self.url}
        if self.path:
            data["path"] = self.path
        return data


@dataclass
class TorrentInfo:
    """Torrent as reported by the download client"""

    id: int
    name: str
    hash_string: str


@dataclass
class Listing:
    """Entry of the catalog's latest releases feed"""

    id: int
    title: str
    season: int
    episode: int
    filename: str = ""
    episode_url: str = ""
    torrent_url: str = ""
    magnet_url: str = ""
    size_bytes: int = 0
    seeds: int = 0
    peers: int = 0
    released: datetime | None = None

    def __str__(self) -> str:
        return (
            f"Title:     {self.title}\n"
            f"Season:    {self.season}\n"
            f"Episode:   {self.episode}\n"
            f"Released:  {self.released or '-'}\n"
            f"URL:       {self.episode_url}\n"
            f"Size:      {format_size(self.size_bytes)}\n"
            f"Seeds:     {self.seeds} ({self.peers} peers)\n"
            f"Filename:  {self.filename}"
        )


@dataclass
class DispatchResult:
    """Outcome of enqueuing one episode"""

    episode: Episode
    target_dir: str
    torrent: TorrentInfo | None = None
    error: str | None = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class DispatchReport:
    """Outcome of enqueuing a batch of episodes"""

    results: List[DispatchResult] = field(default_factory=list)

    @property
    def successes(self) -> List[DispatchResult]:
        return [r for r in self.results if r.success]

    @property
    def failures(self) -> List[DispatchResult]:
        return [r for r in self.results if not r.success]


@dataclass
class ShowReport:
    """Outcome of updating one show"""

    title: str
    url: str
    selected: List[Episode] = field(default_factory=list)
    dispatch: DispatchReport = field(default_factory=DispatchReport)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.dispatch.failures
