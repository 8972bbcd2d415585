"""
Reconciliation of a show's catalog listing against local storage
"""

import logging
import os
from typing import Dict, List

from .matcher import fuzzy_match
from .models import Episode, Show
from .scanner import LocalMap, scan
from .selector import QualitySelector

logger = logging.getLogger(__name__)

NO_WATERMARK = (0, 0)


class Reconciler:
    """
    Works out which episodes of a show still have to be acquired

    Episodes are compared against the files found under base_dir. By
    default only episodes at or after the latest downloaded one are
    considered, include_all lifts that cutoff (backfill).
    """

    def __init__(self, base_dir: str, selector: QualitySelector | None = None):
        self.base_dir = base_dir
        self.selector = selector or QualitySelector()

    def mark_downloaded(self, show: Show) -> LocalMap:
        """
        Flag the episodes of show that are present on disk

        Raises:
            ScanError: the show directory is ambiguous or unreadable
        """
        local = scan(self.base_dir, show.title)
        for episode in show.episodes:
            found = local.get(episode.season, {}).get(episode.episode)
            if found is None:
                continue
            expected = os.path.basename(episode.expected_path(self.base_dir))
            if fuzzy_match(expected, os.path.basename(found)):
                episode.downloaded = True
                episode.path = found
            else:
                logger.debug(
                    f"{show.title} S{episode.season:02d}E{episode.episode:02d}: "
                    f"{found} does not match {expected!r}"
                )
        return local

    @staticmethod
    def watermark(show: Show) -> tuple[int, int]:
        """Latest (season, episode) among downloaded episodes, (0, 0) if none"""
        downloaded = [e.slot for e in show.episodes if e.downloaded]
        return max(downloaded) if downloaded else NO_WATERMARK

    def candidates(self, show: Show, include_all: bool = False) -> List[Episode]:
        """
        Episodes whose slot has no release on disk, cut at the watermark
        unless include_all
        """
        present = {e.slot for e in show.episodes if e.downloaded}
        mark = self.watermark(show)

        result = []
        for episode in show.episodes:
            if episode.slot in present:
                continue
            if not include_all and present and episode.slot < mark:
                if episode.season < 0:
                    logger.info(
                        f"{show.title}: skipping unparseable release {episode.title!r}"
                    )
                continue
            result.append(episode)
        return result

    def reconcile(self, show: Show, include_all: bool = False) -> List[Episode]:
        """
        Return the releases to acquire for show, one per episode slot

        The result is sorted by season, then episode.
        """
        self.mark_downloaded(show)

        groups: Dict[tuple[int, int], List[Episode]] = {}
        for episode in self.candidates(show, include_all):
            groups.setdefault(episode.slot, []).append(episode)

        selected = [self.selector.select(groups[slot]) for slot in sorted(groups)]
        season, number = self.watermark(show)
        logger.info(
            f"{show.title}: {len(selected)} episodes to acquire "
            f"(latest downloaded S{season:02d}E{number:02d})"
        )
        return selected
