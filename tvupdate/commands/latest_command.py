"""
Latest and search commands - browse the catalog's most recent releases
"""

import logging
import re
from typing import Callable, List

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from tvupdate.base_client import CatalogClient
from tvupdate.errors import FetchError
from tvupdate.models import Listing

logger = logging.getLogger(__name__)
console = Console()

ANY = "any"


def listing_filter(
    title: str = ".*", season: str = ANY, episode: str = ANY
) -> Callable[[Listing], bool]:
    """
    Build a predicate on listings

    Args:
        title: Regular expression searched in the listing title
        season: Season number, or "any"
        episode: Episode number, or "any"

    Raises:
        ValueError: season/episode is neither "any" nor a number,
            or title is not a valid regular expression
    """
    try:
        pattern = re.compile(title)
    except re.error as e:
        raise ValueError(f"Invalid regexp {title!r}: {e}") from e
    season_number = None if season == ANY else int(season)
    episode_number = None if episode == ANY else int(episode)

    def predicate(listing: Listing) -> bool:
        if season_number is not None and listing.season != season_number:
            return False
        if episode_number is not None and listing.episode != episode_number:
            return False
        return bool(pattern.search(listing.title))

    return predicate


def print_listings(listings: List[Listing], long: bool = False) -> None:
    for listing in listings:
        if long:
            console.print(str(listing), markup=False)
            console.print()
        else:
            released = listing.released.strftime("%Y-%m-%d %H:%M") if listing.released else "-"
            console.print(f"{released} {listing.title} - {listing.episode_url}", markup=False)


def latest_command(catalog: CatalogClient, count: int = 5, long: bool = False) -> None:
    """List the most recent releases"""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Fetching releases...", total=None)
        listings = catalog.latest_listings(count)
        progress.update(task, completed=True)
    print_listings(listings, long)


def search_command(
    catalog: CatalogClient,
    predicate: Callable[[Listing], bool],
    matches: int = 1,
    long: bool = False,
) -> List[Listing]:
    """
    Print the most recent releases satisfying predicate

    Running out of pages is not fatal: what was found is still printed.
    """
    try:
        listings = catalog.last_matching(matches, predicate)
    except FetchError as e:
        logger.warning(f"error while getting shows: {e}")
        console.print(f"[yellow]Warning:[/yellow] {e}")
        listings = e.partial
    print_listings(listings, long)
    return listings
