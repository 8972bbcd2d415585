"""
Command Line Interface (CLI) with Click
"""

import logging
import sys

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from tvupdate.base_client import CatalogClient
from tvupdate.cli_config import (
    connect_transmission,
    load_config_from_args,
    resolve_config_path,
    save_config,
    setup_context,
)
from tvupdate.commands import (
    add_episode,
    latest_command,
    list_command,
    listing_filter,
    print_report,
    print_summary,
    search_command,
    show_command,
    test_command,
    update_all,
    update_show,
)
from tvupdate.config import Config
from tvupdate.errors import FetchError, NoMatchError, ScanError
from tvupdate.lookup import find_show
from tvupdate.utils import format_episode_info, setup_logging

logger = logging.getLogger(__name__)
console = Console()


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(dir_okay=False),
    help="YAML configuration file (default ~/.eztvupdate.yaml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx, config, log_level):
    """tvupdate - Keep tracked EZTV shows downloaded through Transmission"""

    config_path = resolve_config_path(config)
    cfg = load_config_from_args(config, log_level)

    # Setup logging
    setup_logging(cfg.log_level)

    ctx.ensure_object(dict)
    ctx.obj.update(setup_context(cfg, config_path))


def _lookup(query: str, config: Config, catalog: CatalogClient):
    """Resolve a show query, exiting on failure"""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task(f"Looking up {query}...", total=None)
            found = find_show(query, config, catalog)
            progress.update(task, completed=True)
        return found
    except (NoMatchError, FetchError) as e:
        console.print(f"[red]Error while getting show {query!r}:[/red] {e}")
        sys.exit(1)


@cli.command(name="list")
@click.option("--remote", "-r", is_flag=True, help="Also list every show on EZTV")
@click.option("--limit", "-l", help="Only shows whose title contains this text")
@click.pass_context
def list_shows(ctx, remote, limit):
    """List tracked shows (and remote ones with --remote)"""

    config: Config = ctx.obj["config"]
    catalog: CatalogClient = ctx.obj["catalog"]

    try:
        list_command(config, catalog, remote=remote, limit=limit)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.exception("Error during listing")
        sys.exit(1)


@cli.command()
@click.argument("query")
@click.option("--quiet", "-q", is_flag=True, help="Quieter output")
@click.option("--add", "add_index", type=int, help="Enqueue the release with this index")
@click.option("--dry-run", "-d", is_flag=True, help="Simulation mode (don't enqueue)")
@click.pass_context
def show(ctx, query, quiet, add_index, dry_run):
    """Show the releases of a show, flagging the downloaded ones"""

    config: Config = ctx.obj["config"]
    catalog: CatalogClient = ctx.obj["catalog"]

    found, _ = _lookup(query, config, catalog)

    try:
        show_command(found, config, quiet=quiet)
    except ScanError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if add_index is None:
        return

    adapter = None if dry_run else connect_transmission(config)
    try:
        result = add_episode(found, add_index, config, adapter, dry_run=dry_run)
    except IndexError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    ep = result.episode
    ep_info = format_episode_info(found.title, ep.season, ep.episode, ep.title)
    if result.dry_run:
        console.print(f"[yellow]DRY RUN:[/yellow] {ep_info} -> {result.target_dir}")
    elif result.success:
        console.print(
            f"[green]✓ Added:[/green] {ep_info} - id {result.torrent.id}, "
            f"downloading in {result.target_dir}"
        )
    else:
        console.print(f"[red]✗ Failed:[/red] {ep_info}: {result.error}")
        sys.exit(1)


@cli.command()
@click.argument("query")
@click.option(
    "--all", "-a", "include_all", is_flag=True,
    help="Update all episodes, not just the newest ones",
)
@click.option("--quiet", "-q", is_flag=True, help="Quieter output")
@click.option("--dry-run", "-d", is_flag=True, help="Simulation mode (don't enqueue)")
@click.pass_context
def update(ctx, query, include_all, quiet, dry_run):
    """Enqueue the missing episodes of one show and track it"""

    config: Config = ctx.obj["config"]
    catalog: CatalogClient = ctx.obj["catalog"]

    found, tracked = _lookup(query, config, catalog)
    if not tracked:
        config.track(found.title, found.url)

    adapter = None if dry_run else connect_transmission(config)

    try:
        report = update_show(found, config, adapter, include_all, dry_run)
    finally:
        save_config(config, ctx.obj["config_path"], dry_run)

    print_report(report, quiet)
    if dry_run:
        console.print("\n[yellow]DRY RUN mode - No downloads performed[/yellow]")
    if not report.ok:
        sys.exit(1)


@cli.command(name="update-all")
@click.option(
    "--all", "-a", "include_all", is_flag=True,
    help="Update all episodes, not just the newest ones",
)
@click.option("--quiet", "-q", is_flag=True, help="Quieter output")
@click.option("--dry-run", "-d", is_flag=True, help="Simulation mode (don't enqueue)")
@click.option("--workers", "-w", type=int, help="Shows updated in parallel")
@click.pass_context
def update_all_shows(ctx, include_all, quiet, dry_run, workers):
    """Enqueue the missing episodes of every tracked show"""

    config: Config = ctx.obj["config"]
    catalog: CatalogClient = ctx.obj["catalog"]

    if not config.shows:
        console.print("[yellow]No shows saved[/yellow]")
        return

    adapter = None if dry_run else connect_transmission(config)

    reports = update_all(
        config, catalog, adapter, include_all, dry_run, max_workers=workers
    )
    for report in reports:
        print_report(report, quiet)
    print_summary(reports, dry_run)

    save_config(config, ctx.obj["config_path"], dry_run)

    if not all(r.ok for r in reports):
        sys.exit(1)


@cli.command()
@click.option("--count", "-n", default=5, show_default=True, help="Number of releases")
@click.option("--long", "-l", "long_", is_flag=True, help="Long listing")
@click.pass_context
def latest(ctx, count, long_):
    """List the latest releases on EZTV"""

    catalog: CatalogClient = ctx.obj["catalog"]
    try:
        latest_command(catalog, count, long_)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.exception("Error while fetching latest releases")
        sys.exit(1)


@cli.command()
@click.option("--title", "-t", default=".*", help="Matching title (regexp)")
@click.option("--season", "-s", default="any", help="Matching season")
@click.option("--episode", "-e", default="any", help="Matching episode")
@click.option("--matches", "-m", default=1, show_default=True, help="How many matches")
@click.option("--long", "-l", "long_", is_flag=True, help="Long listing")
@click.pass_context
def search(ctx, title, season, episode, matches, long_):
    """Search the latest releases on EZTV"""

    catalog: CatalogClient = ctx.obj["catalog"]
    try:
        predicate = listing_filter(title, season, episode)
    except ValueError as e:
        raise click.BadParameter(str(e))

    search_command(catalog, predicate, matches, long_)


@cli.command()
@click.pass_context
def test(ctx):
    """Test connection to EZTV and Transmission"""
    config: Config = ctx.obj["config"]
    catalog: CatalogClient = ctx.obj["catalog"]
    test_command(config, catalog)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
