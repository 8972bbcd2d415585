"""
List command - Display tracked shows and, optionally, every show on the catalog
"""

import logging

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from tvupdate.base_client import CatalogClient
from tvupdate.config import Config

logger = logging.getLogger(__name__)
console = Console()


def list_command(
    config: Config,
    catalog: CatalogClient,
    remote: bool = False,
    limit: str | None = None,
) -> None:
    """
    Execute the list command logic

    Tracked shows are flagged "l", catalog shows "r".

    Raises:
        FetchError: the catalog show list could not be fetched
    """
    table = Table(title="Shows")
    table.add_column("", style="yellow", width=1)
    table.add_column("Title", style="green")
    table.add_column("URL", style="dim")
    table.add_column("Path", style="cyan")

    tracked = config.deduplicated_shows()
    if limit:
        tracked = [s for s in tracked if limit.lower() in s.title.lower()]

    if not tracked:
        console.print("[yellow]No shows saved[/yellow]")
    for show in tracked:
        table.add_row("l", show.title, show.url, show.path or "-")

    if remote:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Fetching shows...", total=None)
            shows = catalog.list_shows()
            progress.update(task, completed=True)

        if limit:
            shows = [s for s in shows if limit.lower() in s.title.lower()]
        for show in shows:
            table.add_row("r", show.title, show.url, "")

    if table.row_count:
        console.print(table)
