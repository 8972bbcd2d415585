"""
Show command - Display a show's releases and which of them are on disk
"""

import logging

from rich.console import Console
from rich.table import Table

from tvupdate.base_client import CatalogClient, DownloadAdapter
from tvupdate.commands.update_handler import storage_path
from tvupdate.config import Config
from tvupdate.dispatcher import Dispatcher
from tvupdate.models import DispatchResult, Show
from tvupdate.reconcile import Reconciler

logger = logging.getLogger(__name__)
console = Console()


def show_command(show: Show, config: Config, quiet: bool = False) -> None:
    """
    Print show details and its releases, flagging downloaded ones with "d"

    Raises:
        ScanError: the local show directory is ambiguous or unreadable
    """
    reconciler = Reconciler(storage_path(config, show.url))
    reconciler.mark_downloaded(show)

    downloaded = sum(1 for e in show.episodes if e.downloaded)
    if quiet:
        console.print(
            f"{show.title}: {downloaded} of {len(show.episodes)} releases downloaded"
        )
        return

    console.print(str(show))
    table = Table()
    table.add_column("#", style="cyan", justify="right")
    table.add_column("", style="green", width=1)
    table.add_column("Episode", style="bold")
    table.add_column("Release")
    table.add_column("Size", style="cyan")
    table.add_column("Age", style="dim")

    for index, episode in enumerate(show.episodes):
        table.add_row(
            str(index),
            "d" if episode.downloaded else "",
            f"S{episode.season:02d}E{episode.episode:02d}",
            episode.title,
            episode.size,
            episode.release,
        )
    console.print(table)
    console.print(
        f"[dim]{downloaded} of {len(show.episodes)} releases downloaded[/dim]"
    )


def add_episode(
    show: Show,
    index: int,
    config: Config,
    adapter: DownloadAdapter | None,
    dry_run: bool = False,
) -> DispatchResult:
    """
    Enqueue a single release of show by its listing index

    Raises:
        IndexError: no release at that index
    """
    if index < 0 or index >= len(show.episodes):
        raise IndexError(
            f"No release #{index} (show has {len(show.episodes)} releases)"
        )
    episode = show.episodes[index]
    dispatcher = Dispatcher(adapter, storage_path(config, show.url), dry_run=dry_run)
    return dispatcher.dispatch_one(show, episode)
