"""
Base HTTP client and the capability interfaces used by the core
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List

import requests

from .models import Listing, Show, TorrentInfo

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class BaseHTTPClient:
    """Shared requests session handling"""

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def _get(self, path: str, params: dict | None = None) -> requests.Response:
        """Perform a GET request relative to the base URL"""
        url = path if path.startswith("http") else f"{self.url}/{path.lstrip('/')}"
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response

    def _post(self, path: str, data: dict, **kwargs: Any) -> requests.Response:
        """Perform a POST request relative to the base URL"""
        url = f"{self.url}/{path.lstrip('/')}"
        return self.session.post(url, json=data, timeout=self.timeout, **kwargs)


class CatalogClient(ABC):
    """Source of show and episode listings"""

    @abstractmethod
    def list_shows(self) -> List[Show]:
        """All shows known to the catalog (title and URL only)"""
        pass

    @abstractmethod
    def get_show(self, url: str) -> Show:
        """Full show with its episodes"""
        pass

    @abstractmethod
    def latest_listings(self, n: int) -> List[Listing]:
        """The n most recent releases"""
        pass

    def last_matching(
        self, n: int, predicate: Callable[[Listing], bool]
    ) -> List[Listing]:
        """The n most recent releases for which predicate is true"""
        return [item for item in self.latest_listings(n) if predicate(item)][:n]


class DownloadAdapter(ABC):
    """Download client able to enqueue torrents"""

    @abstractmethod
    def enqueue(self, magnet: str, target_dir: str) -> TorrentInfo:
        """
        Add a torrent downloading into target_dir

        Raises:
            DuplicateError: the torrent is already there
            TransportError: the client could not be reached or refused
        """
        pass
