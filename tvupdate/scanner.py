"""
Local inventory scanner - finds episode files already on disk
"""

import logging
import os
import re
from typing import Dict, Iterator

from .errors import AmbiguousDirectoryError, ScanError
from .models import LocalFile
from .parser import parse_release_filename

logger = logging.getLogger(__name__)

LocalMap = Dict[int, Dict[int, str]]


def title_directory_pattern(title: str) -> re.Pattern:
    """Build the pattern matching a show's directory name (spaces are wildcards)"""
    return re.compile(".".join(re.escape(word) for word in title.split(" ")))


def find_show_directory(base_dir: str, title: str) -> str | None:
    """
    Find the directory holding a show under base_dir

    Returns None when base_dir does not exist or nothing matches.

    Raises:
        AmbiguousDirectoryError: more than one directory matches
        ScanError: base_dir exists but cannot be listed
    """
    if not os.path.isdir(base_dir):
        logger.debug(f"Base directory {base_dir} does not exist")
        return None

    try:
        names = sorted(os.listdir(base_dir))
    except OSError as e:
        raise ScanError(f"unable to list {base_dir}: {e}") from e

    pattern = title_directory_pattern(title)
    candidates = [
        name
        for name in names
        if pattern.search(name) and os.path.isdir(os.path.join(base_dir, name))
    ]

    if len(candidates) > 1:
        raise AmbiguousDirectoryError(title, candidates)
    if not candidates:
        logger.debug(f"No directory matching {title!r} in {base_dir}")
        return None
    return os.path.join(base_dir, candidates[0])


def iter_local_files(directory: str) -> Iterator[LocalFile]:
    """Walk a directory in lexicographic order, yielding episode files"""
    # os.walk skips unreadable directories when onerror is not set
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for name in sorted(files):
            parsed = parse_release_filename(name)
            if parsed is None:
                continue
            path = os.path.join(root, name)
            if not os.path.isfile(path):
                continue
            yield LocalFile(parsed.season, parsed.episode, path)


def scan(base_dir: str, title: str) -> LocalMap:
    """
    Map season -> episode -> path for the files of a show

    When several files fill the same slot the last one visited wins.
    """
    episodes: LocalMap = {}
    directory = find_show_directory(base_dir, title)
    if directory is None:
        return episodes

    for local in iter_local_files(directory):
        episodes.setdefault(local.season, {})[local.episode] = local.path

    logger.debug(
        f"Found {sum(len(e) for e in episodes.values())} episode files in {directory}"
    )
    return episodes
