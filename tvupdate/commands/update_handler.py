"""
Update handler - reconcile shows against local storage and enqueue what is missing
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List

from rich.console import Console

from tvupdate.base_client import CatalogClient, DownloadAdapter
from tvupdate.config import Config
from tvupdate.dispatcher import Dispatcher
from tvupdate.errors import FetchError, ScanError
from tvupdate.models import Show, ShowReport, TrackedShow
from tvupdate.reconcile import Reconciler
from tvupdate.selector import QualitySelector
from tvupdate.utils import format_episode_info

logger = logging.getLogger(__name__)
console = Console()


def storage_path(config: Config, url: str) -> str:
    """Base directory of a show: its tracked override or the default path"""
    # later entries win, as when the show list is saved
    for tracked in reversed(config.find_tracked(url)):
        if tracked.path:
            return tracked.path
    return config.default_path


def update_show(
    show: Show,
    config: Config,
    adapter: DownloadAdapter | None,
    include_all: bool = False,
    dry_run: bool = False,
) -> ShowReport:
    """
    Reconcile a single show and enqueue its missing episodes

    Args:
        show: Show fetched from the catalog
        config: Configuration object
        adapter: Download client (may be None in dry run)
        include_all: If True, backfill episodes older than the latest download
        dry_run: If True, don't enqueue anything

    Returns:
        ShowReport for the show, with error set when the local scan failed
    """
    report = ShowReport(title=show.title, url=show.url)
    base_dir = storage_path(config, show.url)

    selector = QualitySelector(config.quality_preferences, config.quality_policy)
    reconciler = Reconciler(base_dir, selector)
    try:
        report.selected = reconciler.reconcile(show, include_all)
    except ScanError as e:
        logger.error(f"unable to get list of existing episodes for {show.title}: {e}")
        report.error = str(e)
        return report

    dispatcher = Dispatcher(adapter, base_dir, dry_run=dry_run)
    report.dispatch = dispatcher.dispatch(show, report.selected)
    return report


def _update_tracked(
    tracked: TrackedShow,
    config: Config,
    catalog: CatalogClient,
    adapter: DownloadAdapter | None,
    include_all: bool,
    dry_run: bool,
) -> ShowReport:
    try:
        show = catalog.get_show(tracked.url)
    except FetchError as e:
        logger.error(f"error while getting show {tracked.url}: {e}")
        return ShowReport(title=tracked.title, url=tracked.url, error=str(e))
    return update_show(show, config, adapter, include_all, dry_run)


def update_all(
    config: Config,
    catalog: CatalogClient,
    adapter: DownloadAdapter | None,
    include_all: bool = False,
    dry_run: bool = False,
    max_workers: int | None = None,
) -> List[ShowReport]:
    """
    Update every tracked show, one task per show

    Tasks only read the configuration. All of them are waited for, and a
    task raising is reported as a failed show instead of stopping the others.

    Returns:
        One ShowReport per tracked show, sorted by title
    """
    shows = config.deduplicated_shows()
    if not shows:
        return []

    workers = max(1, min(max_workers or config.max_workers, len(shows)))
    reports: List[ShowReport] = []
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(
                _update_tracked, tracked, config, catalog, adapter, include_all, dry_run
            ): tracked
            for tracked in shows
        }
        for future in as_completed(futures):
            tracked = futures[future]
            try:
                reports.append(future.result())
            except Exception as e:
                logger.exception(f"Unexpected error while updating {tracked.title}")
                reports.append(
                    ShowReport(title=tracked.title, url=tracked.url, error=str(e))
                )

    return sorted(reports, key=lambda r: r.title)


def print_report(report: ShowReport, quiet: bool = False) -> None:
    """Display the outcome of one show update"""
    console.print(f"\n[bold cyan]Processing:[/bold cyan] {report.title}")

    if report.error:
        console.print(f"  [red]Error:[/red] {report.error}")
        return

    if not report.selected:
        console.print("  [dim]No missing episodes[/dim]")
        return

    for result in report.dispatch.results:
        ep = result.episode
        ep_info = format_episode_info(report.title, ep.season, ep.episode, ep.title)
        if result.dry_run:
            if not quiet:
                console.print(f"  [yellow]DRY RUN:[/yellow] {ep_info}")
                console.print(f"    [dim]Directory:[/dim] {result.target_dir}")
        elif result.success:
            if not quiet:
                console.print(
                    f"  [green]✓ Added:[/green] {ep_info} "
                    f"- id {result.torrent.id}, downloading in {result.target_dir}"
                )
        else:
            console.print(f"  [red]✗ Failed:[/red] {ep_info}: {result.error}")

    successes = len(report.dispatch.successes)
    failures = len(report.dispatch.failures)
    console.print(
        f"  [dim]{len(report.selected)} selected, "
        f"{successes} added, {failures} failed[/dim]"
    )


def print_summary(reports: List[ShowReport], dry_run: bool = False) -> None:
    """Display the aggregate outcome of several show updates"""
    added = sum(
        1 for r in reports for result in r.dispatch.successes if not result.dry_run
    )
    planned = sum(
        1 for r in reports for result in r.dispatch.results if result.dry_run
    )
    failed = sum(len(r.dispatch.failures) for r in reports)
    show_errors = [r for r in reports if r.error]

    console.print("\n[bold]Overall Summary:[/bold]")
    console.print(f"  Shows: {len(reports)}")
    console.print(f"  [green]Episodes added: {added}[/green]")
    if dry_run:
        console.print(f"  [yellow]Episodes planned: {planned}[/yellow]")
    console.print(f"  [red]Episodes failed: {failed}[/red]")
    if show_errors:
        console.print(f"  [red]Shows skipped: {len(show_errors)}[/red]")
        for report in show_errors:
            console.print(f"    [red]✗[/red] {report.title} ({report.url}): {report.error}")

    if dry_run:
        console.print("\n[yellow]DRY RUN mode - No downloads performed[/yellow]")
