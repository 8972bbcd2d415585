"""
Exceptions raised by tvupdate
"""


class TvUpdateError(Exception):
    """Base exception for all tvupdate errors"""

    pass


class ConfigError(TvUpdateError):
    """Configuration file is unreadable or malformed"""

    pass


class FetchError(TvUpdateError):
    """Remote catalog unreachable or returned something we cannot parse"""

    def __init__(self, message: str, partial: list | None = None):
        super().__init__(message)
        # Results gathered before the failure, if any
        self.partial = partial or []


class ScanError(TvUpdateError):
    """Local show directory could not be scanned"""

    pass


class AmbiguousDirectoryError(ScanError):
    """More than one local directory matches a show title"""

    def __init__(self, title: str, candidates: list[str]):
        super().__init__(
            f"too many directories matching show title {title!r} ({len(candidates)})"
        )
        self.title = title
        self.candidates = candidates


class NoMatchError(TvUpdateError):
    """A show query matched zero or several shows"""

    pass


class TransportError(TvUpdateError):
    """Download client could not be reached or rejected a request"""

    pass


class DuplicateError(TransportError):
    """Torrent is already known to the download client"""

    def __init__(self, existing_id: int, name: str = ""):
        super().__init__(f"duplicated torrent with id {existing_id}")
        self.existing_id = existing_id
        self.name = name
