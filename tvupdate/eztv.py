"""
EZTV catalog client
"""

import logging
from datetime import datetime
from typing import Callable, List
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from .base_client import DEFAULT_TIMEOUT, BaseHTTPClient, CatalogClient
from .errors import FetchError
from .models import Episode, Listing, Show
from .parser import parse_title

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = "https://eztv.ag"
MAX_PAGE_SIZE = 100
MAX_PAGES = 50


def _to_int(value, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_datetime(value) -> datetime | None:
    """Unix timestamp to datetime, None when missing or invalid"""
    try:
        return datetime.fromtimestamp(int(value))
    except (TypeError, ValueError, OverflowError, OSError):
        return None


class EztvClient(BaseHTTPClient, CatalogClient):
    """Client scraping show pages and reading the torrent API of EZTV"""

    def __init__(self, url: str = DEFAULT_CATALOG_URL, timeout: float = DEFAULT_TIMEOUT):
        super().__init__(url, timeout)

    def _fetch(self, path: str, params: dict | None = None) -> requests.Response:
        try:
            return self._get(path, params=params)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"unable to fetch {path}: {e}") from e

    def _soup(self, path: str) -> BeautifulSoup:
        return BeautifulSoup(self._fetch(path).text, "html.parser")

    def list_shows(self) -> List[Show]:
        """Fetch the list of all shows"""
        soup = self._soup(f"{self.url}/showlist/")
        shows = []
        for link in soup.select("table tr td.forum_thread_post a"):
            href = link.get("href")
            if not href:
                continue
            shows.append(
                Show(title=link.get_text(strip=True), url=urljoin(self.url + "/", href))
            )
        logger.debug(f"Catalog lists {len(shows)} shows")
        return shows

    def get_show(self, url: str) -> Show:
        """Fetch a show page with all its episodes"""
        soup = self._soup(url)
        show = Show(title="", url=url)

        title = soup.select_one("td h1 b span")
        if title is None:
            raise FetchError(f"no show title found at {url}")
        show.title = title.get_text(strip=True)
        rating = soup.select_one("b span[itemprop=ratingValue]")
        if rating is not None:
            show.rating = rating.get_text(strip=True)

        for row in soup.select("table tr"):
            cells = row.find_all("td", recursive=False)
            if len(cells) != 6:
                continue
            info = row.select_one("td.forum_thread_post a.epinfo")
            if info is None:
                continue
            magnet = row.select_one("td.forum_thread_post a.magnet")
            torrent = row.select_one("td.forum_thread_post a.download_1")

            release_title = info.get_text(strip=True)
            parsed = parse_title(release_title)
            show.episodes.append(
                Episode(
                    show_title=show.title,
                    season=parsed.season,
                    episode=parsed.episode,
                    title=release_title,
                    size=cells[3].get_text(strip=True),
                    release=cells[4].get_text(strip=True),
                    torrent_url=torrent.get("href", "") if torrent else "",
                    magnet_url=magnet.get("href", "") if magnet else "",
                    episode_url=urljoin(url, info.get("href", "")),
                    show_url=url,
                )
            )

        show.sort_episodes()
        logger.debug(f"{show.title}: {len(show.episodes)} releases listed")
        return show

    def _listings_page(self, limit: int, page: int) -> List[Listing]:
        response = self._fetch(
            f"{self.url}/api/get-torrents", params={"limit": limit, "page": page}
        )
        try:
            torrents = response.json().get("torrents") or []
        except ValueError as e:
            raise FetchError(f"invalid torrent feed page {page}: {e}") from e

        return [
            Listing(
                id=_to_int(item.get("id")),
                title=item.get("title", ""),
                season=_to_int(item.get("season"), -1),
                episode=_to_int(item.get("episode"), -1),
                filename=item.get("filename", ""),
                episode_url=item.get("episode_url", ""),
                torrent_url=item.get("torrent_url", ""),
                magnet_url=item.get("magnet_url", ""),
                size_bytes=_to_int(item.get("size_bytes")),
                seeds=_to_int(item.get("seeds")),
                peers=_to_int(item.get("peers")),
                released=_to_datetime(item.get("date_released_unix")),
            )
            for item in torrents
        ]

    def latest_listings(self, n: int) -> List[Listing]:
        """Fetch the n most recent releases, paging as needed"""
        listings: List[Listing] = []
        page = 1
        while len(listings) < n:
            batch = self._listings_page(min(MAX_PAGE_SIZE, n), page)
            if not batch:
                break
            listings.extend(batch)
            page += 1
        return listings[:n]

    def last_matching(
        self,
        n: int,
        predicate: Callable[[Listing], bool],
        max_pages: int = MAX_PAGES,
    ) -> List[Listing]:
        """
        Page through the feed until n releases satisfy predicate

        Raises:
            FetchError: on transport failure, or when fewer than n releases
                match within max_pages (the matches found are in .partial)
        """
        found: List[Listing] = []
        for page in range(1, max_pages + 1):
            if len(found) >= n:
                break
            if page % 10 == 0:
                logger.info(f"Page {page}")
            try:
                batch = self._listings_page(MAX_PAGE_SIZE, page)
            except FetchError as e:
                raise FetchError(str(e), partial=found) from e
            if not batch:
                break
            for item in batch:
                if predicate(item):
                    found.append(item)
                    if len(found) >= n:
                        break

        if len(found) < n:
            raise FetchError(
                f"After {MAX_PAGE_SIZE * max_pages} results only {len(found)} "
                "matching your request",
                partial=found,
            )
        return found
