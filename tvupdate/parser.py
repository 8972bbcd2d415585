"""
Release title parsing
"""

import re
from typing import NamedTuple

VIDEO_EXTENSIONS = (
    "mkv",
    "avi",
    "mp4",
    "asf",
    "mov",
    "flv",
    "swf",
    "qt",
    "vob",
    "ogg",
    "ogv",
    "yuv",
    "mpg",
    "mpg2",
    "mpeg",
    "mpv",
    "m4v",
)

# Title fragment is lazy so the first SxxEyy marker wins
TITLE_PATTERN = re.compile(
    r"^(?P<title>.*?)\s*S?(?P<season>[0-9]+)[Ex](?P<episode>[0-9]+).*$",
    re.IGNORECASE | re.DOTALL,
)

RELEASE_FILE_PATTERN = re.compile(
    r"^(?P<title>.*?)\s*S?(?P<season>[0-9]+)[Ex](?P<episode>[0-9]+).*\.(?:"
    + "|".join(VIDEO_EXTENSIONS)
    + r")$",
    re.IGNORECASE | re.DOTALL,
)


class ParsedTitle(NamedTuple):
    title: str
    season: int
    episode: int


def parse_title(raw: str) -> ParsedTitle:
    """
    Extract show title, season and episode from a release title

    Returns the raw string with season and episode set to -1 when
    no season/episode marker can be found.
    """
    match = TITLE_PATTERN.match(raw)
    if not match:
        return ParsedTitle(raw, -1, -1)
    return ParsedTitle(
        match.group("title"),
        int(match.group("season")),
        int(match.group("episode")),
    )


def parse_release_filename(name: str) -> ParsedTitle | None:
    """Parse a video file name, None if it is not an episode file"""
    match = RELEASE_FILE_PATTERN.match(name)
    if not match:
        return None
    return ParsedTitle(
        match.group("title"),
        int(match.group("season")),
        int(match.group("episode")),
    )
