"""Tests for the reconciliation engine."""

from pathlib import Path

import pytest

from tests.conftest import SHOW_TITLE, SHOW_URL, make_episode
from tvupdate.errors import ScanError
from tvupdate.models import Episode, Show
from tvupdate.reconcile import Reconciler
from tvupdate.selector import QualitySelector


def make_show(*episodes: Episode) -> Show:
    return Show(title=SHOW_TITLE, url=SHOW_URL, episodes=list(episodes))


def slots(episodes) -> list:
    return [e.slot for e in episodes]


class TestMarkDownloaded:
    """Tests for Reconciler.mark_downloaded."""

    def test_matching_file_marks_downloaded(self, base_dir: Path, add_local_file) -> None:
        path = add_local_file(1, 1)
        show = make_show(make_episode(1, 1), make_episode(1, 2))

        Reconciler(str(base_dir)).mark_downloaded(show)

        assert show.episodes[0].downloaded
        assert show.episodes[0].path == str(path)
        assert not show.episodes[1].downloaded
        assert show.episodes[1].path is None

    def test_other_release_in_slot_is_not_downloaded(self, base_dir: Path, add_local_file) -> None:
        add_local_file(1, 1, tag="1080p")
        show = make_show(make_episode(1, 1, tag="720p"))

        Reconciler(str(base_dir)).mark_downloaded(show)

        assert not show.episodes[0].downloaded

    def test_only_matching_release_of_slot_is_marked(self, base_dir: Path, add_local_file) -> None:
        add_local_file(1, 1, tag="1080p")
        hd = make_episode(1, 1, tag="1080p")
        sd = make_episode(1, 1, tag="720p")
        show = make_show(sd, hd)

        Reconciler(str(base_dir)).mark_downloaded(show)

        assert hd.downloaded
        assert not sd.downloaded


class TestWatermark:
    """Tests for Reconciler.watermark."""

    def test_no_download(self) -> None:
        assert Reconciler.watermark(make_show(make_episode(3, 1))) == (0, 0)

    def test_order_independent(self) -> None:
        episodes = [make_episode(2, 1), make_episode(1, 9), make_episode(2, 3)]
        for e in episodes:
            e.downloaded = True

        assert Reconciler.watermark(make_show(*episodes)) == (2, 3)
        assert Reconciler.watermark(make_show(*reversed(episodes))) == (2, 3)

    def test_ignores_missing_episodes(self) -> None:
        downloaded = make_episode(1, 2)
        downloaded.downloaded = True

        assert Reconciler.watermark(make_show(downloaded, make_episode(4, 1))) == (1, 2)


class TestReconcile:
    """Tests for Reconciler.reconcile."""

    def test_newest_only(self, base_dir: Path, add_local_file) -> None:
        """Episodes (1,1), (1,2) downloaded, (2,1) missing: only (2,1) is acquired."""
        add_local_file(1, 1)
        add_local_file(1, 2)
        show = make_show(make_episode(1, 1), make_episode(1, 2), make_episode(2, 1))

        selected = Reconciler(str(base_dir)).reconcile(show, include_all=False)

        assert slots(selected) == [(2, 1)]

    def test_backfill_ignores_watermark(self, base_dir: Path, add_local_file) -> None:
        """(1,1) downloaded, (1,2) and (2,1) missing: backfill acquires both."""
        add_local_file(1, 1)
        show = make_show(make_episode(1, 1), make_episode(1, 2), make_episode(2, 1))

        selected = Reconciler(str(base_dir)).reconcile(show, include_all=True)

        assert slots(selected) == [(1, 2), (2, 1)]

    def test_episodes_before_watermark_skipped(self, base_dir: Path, add_local_file) -> None:
        add_local_file(2, 1)
        show = make_show(
            make_episode(1, 1), make_episode(1, 2), make_episode(2, 1), make_episode(2, 2)
        )

        reconciler = Reconciler(str(base_dir))

        assert slots(reconciler.reconcile(show)) == [(2, 2)]
        assert slots(reconciler.reconcile(show, include_all=True)) == [(1, 1), (1, 2), (2, 2)]

    def test_nothing_downloaded_selects_everything(self, base_dir: Path) -> None:
        show = make_show(make_episode(2, 1), make_episode(1, 1))

        selected = Reconciler(str(base_dir)).reconcile(show)

        assert slots(selected) == [(1, 1), (2, 1)]

    def test_no_show_directory(self, tmp_path: Path) -> None:
        show = make_show(make_episode(1, 1))

        selected = Reconciler(str(tmp_path / "missing")).reconcile(show)

        assert slots(selected) == [(1, 1)]

    def test_mismatched_file_is_reacquired(self, base_dir: Path, add_local_file) -> None:
        add_local_file(1, 1, tag="HDTV")
        show = make_show(make_episode(1, 1, tag="720p"))

        assert slots(Reconciler(str(base_dir)).reconcile(show)) == [(1, 1)]

    def test_one_release_per_slot(self, base_dir: Path) -> None:
        sd = make_episode(1, 1, tag="HDTV")
        hd = make_episode(1, 1, tag="1080p")
        mid = make_episode(1, 1, tag="720p")
        show = make_show(sd, hd, mid, make_episode(1, 2, tag="HDTV"))

        selected = Reconciler(str(base_dir)).reconcile(show)

        # last release matching any preference wins
        assert selected == [mid, show.episodes[3]]

    def test_priority_selector(self, base_dir: Path) -> None:
        sd = make_episode(1, 1, tag="HDTV")
        hd = make_episode(1, 1, tag="1080p")
        mid = make_episode(1, 1, tag="720p")
        selector = QualitySelector(["1080p", "720p", "HDTV"], policy="priority")

        selected = Reconciler(str(base_dir), selector).reconcile(make_show(sd, hd, mid))

        assert selected == [hd]

    def test_downloaded_episodes_never_selected(self, base_dir: Path, add_local_file) -> None:
        add_local_file(1, 1)
        add_local_file(1, 2)
        show = make_show(make_episode(1, 1), make_episode(1, 2))

        assert Reconciler(str(base_dir)).reconcile(show, include_all=True) == []

    @pytest.mark.parametrize("include_all", [False, True])
    def test_other_release_of_downloaded_slot_skipped(
        self, base_dir: Path, add_local_file, include_all: bool
    ) -> None:
        add_local_file(1, 1, tag="720p")
        show = make_show(
            make_episode(1, 1, tag="720p"), make_episode(1, 1, tag="1080p"), make_episode(1, 2)
        )

        selected = Reconciler(str(base_dir)).reconcile(show, include_all=include_all)

        assert slots(selected) == [(1, 2)]

    def test_unparseable_release(self, base_dir: Path, add_local_file) -> None:
        special = Episode(show_title=SHOW_TITLE, season=-1, episode=-1, title="Mr Robot Special")
        show = make_show(special, make_episode(1, 1))

        # No watermark yet: the unparseable release is a candidate
        assert special in Reconciler(str(base_dir)).reconcile(show)

        add_local_file(1, 1)
        show = make_show(special, make_episode(1, 1), make_episode(1, 2))
        reconciler = Reconciler(str(base_dir))

        assert special not in reconciler.reconcile(show)
        assert special in reconciler.reconcile(show, include_all=True)

    def test_scan_error_propagates(self, base_dir: Path, show_dir: Path) -> None:
        (base_dir / "Mr.Robot.Extras").mkdir()

        with pytest.raises(ScanError):
            Reconciler(str(base_dir)).reconcile(make_show(make_episode(1, 1)))
