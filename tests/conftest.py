"""Shared fixtures for tvupdate tests."""

from pathlib import Path
from typing import Callable, Dict, List

import pytest

from tvupdate.base_client import CatalogClient, DownloadAdapter
from tvupdate.config import Config
from tvupdate.errors import FetchError, TransportError
from tvupdate.models import Episode, Listing, Show, TorrentInfo

SHOW_TITLE = "Mr Robot"
SHOW_URL = "https://eztv.ag/shows/1316/mr-robot/"


def make_episode(
    season: int,
    episode: int,
    tag: str = "720p",
    show_title: str = SHOW_TITLE,
) -> Episode:
    """Build a release whose torrent file name follows scene conventions."""
    name = f"Mr.Robot.S{season:02d}E{episode:02d}.{tag}.WEB.x264-GRP[eztv].mkv"
    return Episode(
        show_title=show_title,
        season=season,
        episode=episode,
        title=f"Mr Robot S{season:02d}E{episode:02d} {tag} WEB x264-GRP",
        size="1.2 GB",
        release="2 weeks",
        torrent_url=f"https://zoink.ch/torrent/{name}.torrent",
        magnet_url=f"magnet:?xt=urn:btih:{season:02d}{episode:02d}{tag}",
        show_url=SHOW_URL,
    )


def local_name(season: int, episode: int, tag: str = "720p") -> str:
    """On-disk name of a release produced by make_episode (without [eztv])."""
    return f"Mr.Robot.S{season:02d}E{episode:02d}.{tag}.WEB.x264-GRP.mkv"


class FakeCatalog(CatalogClient):
    """In-memory catalog."""

    def __init__(
        self,
        shows: List[Show] | None = None,
        listings: List[Listing] | None = None,
        failing: set | None = None,
    ):
        self.shows: Dict[str, Show] = {s.url: s for s in shows or []}
        self.listings = listings or []
        self.failing = failing or set()

    def list_shows(self) -> List[Show]:
        return [Show(title=s.title, url=s.url) for s in self.shows.values()]

    def get_show(self, url: str) -> Show:
        if url in self.failing or url not in self.shows:
            raise FetchError(f"unable to fetch {url}")
        return self.shows[url]

    def latest_listings(self, n: int) -> List[Listing]:
        return self.listings[:n]


class FakeAdapter(DownloadAdapter):
    """Download client recording enqueued torrents."""

    def __init__(self, fail_on: Callable[[str], bool] | None = None):
        self.calls: List[tuple[str, str]] = []
        self.fail_on = fail_on or (lambda magnet: False)

    def enqueue(self, magnet: str, target_dir: str) -> TorrentInfo:
        self.calls.append((magnet, target_dir))
        if self.fail_on(magnet):
            raise TransportError(f"refused {magnet}")
        return TorrentInfo(id=len(self.calls), name=magnet, hash_string="abc")


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Storage root holding the show directory."""
    root = tmp_path / "series"
    root.mkdir()
    return root


@pytest.fixture
def show_dir(base_dir: Path) -> Path:
    directory = base_dir / SHOW_TITLE
    directory.mkdir()
    return directory


@pytest.fixture
def add_local_file(show_dir: Path) -> Callable[..., Path]:
    """Create an episode file under the show's season directory."""

    def _add(season: int, episode: int, tag: str = "720p", name: str | None = None) -> Path:
        season_dir = show_dir / f"S{season:02d}"
        season_dir.mkdir(exist_ok=True)
        path = season_dir / (name or local_name(season, episode, tag))
        path.write_bytes(b"")
        return path

    return _add


@pytest.fixture
def config(base_dir: Path) -> Config:
    return Config(default_path=str(base_dir))


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()
