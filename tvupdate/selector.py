"""
Quality selection among competing releases of the same episode
"""

import logging
import re
from typing import Sequence

from .models import Episode

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES = ["1080p", "720p", "HDTV"]

LAST_MATCH = "last-match"
PRIORITY = "priority"
POLICIES = (LAST_MATCH, PRIORITY)


class QualitySelector:
    """
    Picks one release out of several for the same episode slot

    Two policies are available:
    - "last-match" (default): candidates are scanned in order and every
      candidate matching any preference replaces the current pick, so the
      last matching candidate wins whatever its rank.
    - "priority": the candidate matching the earliest preference wins,
      ties keep the earlier candidate.

    Preferences are case-insensitive regular expressions searched in the
    release title and in the magnet/torrent locator.
    """

    def __init__(
        self,
        preferences: Sequence[str] | None = None,
        policy: str = LAST_MATCH,
    ):
        if policy not in POLICIES:
            raise ValueError(
                f"Unknown quality policy {policy!r} (expected one of {', '.join(POLICIES)})"
            )
        self.preferences = (
            list(preferences) if preferences is not None else list(DEFAULT_PREFERENCES)
        )
        self.policy = policy
        self._patterns = [re.compile(p, re.IGNORECASE) for p in self.preferences]

    def _matches(self, episode: Episode, pattern: re.Pattern) -> bool:
        return bool(
            pattern.search(episode.title) or pattern.search(episode.locator)
        )

    def rank(self, episode: Episode) -> int | None:
        """Index of the first preference the episode matches, None if none"""
        for index, pattern in enumerate(self._patterns):
            if self._matches(episode, pattern):
                return index
        return None

    def select(self, candidates: Sequence[Episode]) -> Episode:
        """Return the preferred release among candidates"""
        if not candidates:
            raise ValueError("No candidates to select from")
        if len(candidates) == 1:
            return candidates[0]

        if self.policy == PRIORITY:
            return self._select_priority(candidates)

        best = candidates[0]
        for candidate in candidates:
            for pattern in self._patterns:
                if self._matches(candidate, pattern):
                    best = candidate
        logger.debug(f"Selected {best.title!r} among {len(candidates)} releases")
        return best

    def _select_priority(self, candidates: Sequence[Episode]) -> Episode:
        best = candidates[0]
        best_rank = self.rank(best)
        for candidate in candidates[1:]:
            rank = self.rank(candidate)
            if rank is None:
                continue
            if best_rank is None or rank < best_rank:
                best, best_rank = candidate, rank
        logger.debug(f"Selected {best.title!r} among {len(candidates)} releases")
        return best
