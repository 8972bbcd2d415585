"""Tests for the update workflow."""

from pathlib import Path

import pytest

from tests.conftest import SHOW_TITLE, SHOW_URL, FakeAdapter, FakeCatalog, make_episode
from tvupdate.commands.update_handler import (
    print_summary,
    storage_path,
    update_all,
    update_show,
)
from tvupdate.config import Config
from tvupdate.models import Show, TrackedShow

FARGO_URL = "https://eztv.ag/shows/1129/fargo/"


def robot_show() -> Show:
    return Show(
        title=SHOW_TITLE,
        url=SHOW_URL,
        episodes=[make_episode(1, 1), make_episode(1, 2), make_episode(2, 1)],
    )


def fargo_show() -> Show:
    return Show(
        title="Fargo",
        url=FARGO_URL,
        episodes=[make_episode(3, 1, show_title="Fargo"), make_episode(3, 2, show_title="Fargo")],
    )


class BrokenCatalog(FakeCatalog):
    def get_show(self, url: str) -> Show:
        if url == FARGO_URL:
            raise RuntimeError("parser exploded")
        return super().get_show(url)


class TestStoragePath:
    """Tests for storage_path."""

    def test_default(self, config: Config) -> None:
        assert storage_path(config, SHOW_URL) == config.default_path

    def test_override(self, config: Config) -> None:
        config.shows = [TrackedShow(SHOW_TITLE, SHOW_URL, path="/elsewhere")]

        assert storage_path(config, SHOW_URL) == "/elsewhere"

    def test_later_duplicate_wins(self, config: Config) -> None:
        config.shows = [
            TrackedShow(SHOW_TITLE, SHOW_URL, path="/first"),
            TrackedShow(SHOW_TITLE, SHOW_URL, path="/second"),
        ]

        assert storage_path(config, SHOW_URL) == "/second"
        assert config.deduplicated_shows()[0].path == "/second"


class TestUpdateShow:
    """Tests for update_show."""

    def test_enqueues_missing_episodes(self, config: Config, add_local_file, fake_adapter: FakeAdapter) -> None:
        add_local_file(1, 1)
        add_local_file(1, 2)

        report = update_show(robot_show(), config, fake_adapter)

        assert report.ok
        assert [e.slot for e in report.selected] == [(2, 1)]
        assert len(fake_adapter.calls) == 1
        assert fake_adapter.calls[0][1] == str(Path(config.default_path) / SHOW_TITLE / "S02")

    def test_backfill(self, config: Config, add_local_file, fake_adapter: FakeAdapter) -> None:
        add_local_file(1, 1)

        report = update_show(robot_show(), config, fake_adapter, include_all=True)

        assert [e.slot for e in report.selected] == [(1, 2), (2, 1)]

    def test_dry_run(self, config: Config, fake_adapter: FakeAdapter) -> None:
        report = update_show(robot_show(), config, None, dry_run=True)

        assert len(report.dispatch.results) == 3
        assert all(r.dry_run for r in report.dispatch.results)

    def test_scan_error_is_reported(self, config: Config, base_dir: Path, fake_adapter: FakeAdapter) -> None:
        (base_dir / "Mr Robot").mkdir()
        (base_dir / "Mr.Robot.Extras").mkdir()

        report = update_show(robot_show(), config, fake_adapter)

        assert not report.ok
        assert "too many directories" in report.error
        assert fake_adapter.calls == []

    def test_partial_failure(self, config: Config) -> None:
        show = robot_show()
        adapter = FakeAdapter(fail_on=lambda magnet: magnet == show.episodes[1].magnet_url)

        report = update_show(show, config, adapter)

        assert not report.ok
        assert len(report.dispatch.successes) == 2
        assert len(report.dispatch.failures) == 1


class TestUpdateAll:
    """Tests for update_all."""

    def test_every_tracked_show_is_updated(self, config: Config, fake_adapter: FakeAdapter) -> None:
        config.shows = [TrackedShow(SHOW_TITLE, SHOW_URL), TrackedShow("Fargo", FARGO_URL)]
        catalog = FakeCatalog(shows=[robot_show(), fargo_show()])

        reports = update_all(config, catalog, fake_adapter, max_workers=2)

        assert [r.title for r in reports] == ["Fargo", SHOW_TITLE]
        assert all(r.ok for r in reports)
        assert len(fake_adapter.calls) == 5

    def test_fetch_error_skips_show(self, config: Config, fake_adapter: FakeAdapter) -> None:
        config.shows = [TrackedShow(SHOW_TITLE, SHOW_URL), TrackedShow("Fargo", FARGO_URL)]
        catalog = FakeCatalog(shows=[robot_show(), fargo_show()], failing={FARGO_URL})

        reports = update_all(config, catalog, fake_adapter)

        fargo, robot = reports
        assert fargo.error is not None
        assert fargo.url == FARGO_URL
        assert robot.ok
        assert len(robot.dispatch.successes) == 3

    def test_unexpected_error_is_collected(self, config: Config, fake_adapter: FakeAdapter) -> None:
        config.shows = [TrackedShow(SHOW_TITLE, SHOW_URL), TrackedShow("Fargo", FARGO_URL)]
        catalog = BrokenCatalog(shows=[robot_show(), fargo_show()])

        reports = update_all(config, catalog, fake_adapter)

        assert reports[0].title == "Fargo"
        assert reports[0].error == "parser exploded"
        assert reports[1].ok

    def test_no_tracked_shows(self, config: Config, fake_adapter: FakeAdapter) -> None:
        assert update_all(config, FakeCatalog(), fake_adapter) == []

    def test_dry_run_without_adapter(self, config: Config) -> None:
        config.shows = [TrackedShow("Fargo", FARGO_URL)]

        reports = update_all(config, FakeCatalog(shows=[fargo_show()]), None, dry_run=True)

        assert [r.dry_run for r in reports[0].dispatch.results] == [True, True]


class TestPrintSummary:
    """Tests for print_summary."""

    def test_dry_run_counts_nothing_as_added(
        self, config: Config, capsys: pytest.CaptureFixture
    ) -> None:
        config.shows = [TrackedShow("Fargo", FARGO_URL)]
        reports = update_all(config, FakeCatalog(shows=[fargo_show()]), None, dry_run=True)

        print_summary(reports, dry_run=True)

        out = capsys.readouterr().out
        assert "Episodes added: 0" in out
        assert "Episodes planned: 2" in out

    def test_added_episodes(
        self, config: Config, fake_adapter: FakeAdapter, capsys: pytest.CaptureFixture
    ) -> None:
        config.shows = [TrackedShow("Fargo", FARGO_URL)]
        reports = update_all(config, FakeCatalog(shows=[fargo_show()]), fake_adapter)

        print_summary(reports)

        out = capsys.readouterr().out
        assert "Episodes added: 2" in out
        assert "planned" not in out
