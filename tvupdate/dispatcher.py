"""
Acquisition dispatcher - hands selected episodes to the download client
"""

import logging
import os
from typing import Iterable

from .base_client import DownloadAdapter
from .errors import TransportError
from .models import DispatchReport, DispatchResult, Episode, Show

logger = logging.getLogger(__name__)


class Dispatcher:
    """Enqueues episodes, one failure never stops the batch"""

    def __init__(
        self,
        adapter: DownloadAdapter | None,
        base_dir: str,
        dry_run: bool = False,
    ):
        if adapter is None and not dry_run:
            raise ValueError("A download adapter is required unless running dry")
        self.adapter = adapter
        self.base_dir = base_dir
        self.dry_run = dry_run

    def target_directory(self, show: Show, episode: Episode) -> str:
        """Season directory an episode is downloaded into"""
        return os.path.join(self.base_dir, show.title, f"S{episode.season:02d}")

    def dispatch_one(self, show: Show, episode: Episode) -> DispatchResult:
        target_dir = self.target_directory(show, episode)

        if self.dry_run:
            logger.info(f"dry-run: adding episode {episode} to {target_dir}")
            return DispatchResult(episode, target_dir, dry_run=True)

        try:
            torrent = self.adapter.enqueue(episode.locator, target_dir)
        except TransportError as e:
            logger.error(f"Error adding {show.title} {episode}: {e}")
            return DispatchResult(episode, target_dir, error=str(e))

        logger.info(
            f"Added {show.title!r} S{episode.season:02d}E{episode.episode:02d} "
            f"- id {torrent.id}, downloading in {target_dir!r}"
        )
        return DispatchResult(episode, target_dir, torrent=torrent)

    def dispatch(self, show: Show, episodes: Iterable[Episode]) -> DispatchReport:
        """Enqueue every episode and collect the outcomes"""
        report = DispatchReport()
        for episode in episodes:
            report.results.append(self.dispatch_one(show, episode))
        return report
