"""Unit tests for sync/scroll.py"""

import asyncio

import pytest

from mdworkspace.core.models import EditorPreferences, ViewMode
from mdworkspace.sync.scroll import (
    AsyncioScheduler, QtScheduler, ScrollSynchronizer, SyncState, TickScheduler, scroll_ratio,
    target_offset,
)


# --- pure mapping ---

@pytest.mark.parametrize("offset,content,viewport,expected", [
    (0, 2000, 500, 0.0),
    (750, 2000, 500, 0.5),
    (1500, 2000, 500, 1.0),
    (3000, 2000, 500, 1.0),
    (-10, 2000, 500, 0.0),
    (0, 500, 500, 0.0),
    (0, 300, 500, 0.0),
])
def test_scroll_ratio(offset, content, viewport, expected):
    """Ratio is offset over scrollable range, guarded against zero range and clamped."""
    assert scroll_ratio(offset, content, viewport) == pytest.approx(expected)


def test_target_offset_no_scrollable_range():
    """A destination that cannot scroll stays at 0."""
    assert target_offset(0.7, 300, 500) == 0.0


@pytest.mark.parametrize("ratio", [0.0, 0.123, 0.5, 0.999, 1.0])
@pytest.mark.parametrize("content,viewport", [(4000, 500), (1001, 1000), (123456.5, 789.25)])
def test_mapping_idempotent(ratio, content, viewport):
    """Re-deriving the ratio from the applied destination offset returns the source ratio."""
    offset = target_offset(ratio, content, viewport)
    assert scroll_ratio(offset, content, viewport) == pytest.approx(ratio)


# --- synchronizer ---

def test_raw_scroll_moves_rendered(sync, raw_view, rendered_view):
    """Half-way in the raw view maps to half-way in the rendered view."""
    assert raw_view.user_scroll(750) is True
    assert rendered_view.writes == [pytest.approx(1750)]


def test_rendered_scroll_moves_raw(sync, raw_view, rendered_view):
    rendered_view.user_scroll(3500)
    assert raw_view.writes == [pytest.approx(1500)]


def test_echo_is_suppressed(sync, raw_view, rendered_view, scheduler):
    """The destination's own scroll event does not bounce back to the source."""
    raw_view.user_scroll(750)
    assert raw_view.writes == []
    assert sync.state is SyncState.propagating
    assert sync.source is raw_view


def test_guard_released_on_next_tick_not_synchronously(sync, raw_view, rendered_view, scheduler):
    raw_view.user_scroll(100)
    assert len(scheduler) == 1
    assert sync.state is SyncState.propagating

    assert rendered_view.user_scroll(3500) is False
    assert raw_view.writes == []

    scheduler.run_pending()
    assert sync.state is SyncState.idle
    assert sync.source is None
    assert rendered_view.user_scroll(3500) is True
    assert raw_view.writes == [pytest.approx(1500)]


def test_fast_scroll_last_write_wins(sync, raw_view, rendered_view, scheduler):
    """Events during propagation are dropped; the first event after release is applied."""
    raw_view.user_scroll(100)
    raw_view.user_scroll(200)
    raw_view.user_scroll(300)
    scheduler.run_pending()
    raw_view.user_scroll(1500)
    assert rendered_view.writes == [pytest.approx(100 / 1500 * 3500), pytest.approx(3500)]


@pytest.mark.parametrize("sync_scroll,mode", [
    (False, ViewMode.split),
    (True, ViewMode.editor),
    (True, ViewMode.preview),
])
def test_disabled_unless_sync_on_and_split(raw_view, rendered_view, scheduler, sync_scroll, mode):
    prefs = EditorPreferences(sync_scroll=sync_scroll, view_mode=mode)
    sync = ScrollSynchronizer(raw_view, rendered_view, prefs, scheduler)
    assert sync.on_raw_scroll() is False
    assert rendered_view.writes == []
    assert len(scheduler) == 0


def test_preferences_read_live(sync, raw_view, rendered_view, prefs, scheduler):
    """Toggling sync off after construction takes effect on the next event."""
    prefs.sync_scroll = False
    assert raw_view.user_scroll(750) is False
    prefs.sync_scroll = True
    assert raw_view.user_scroll(750) is True


def test_foreign_view_ignored(sync, make_view):
    stranger = make_view(content_height=100, viewport_height=10)
    assert sync.on_scroll(stranger) is False
    assert sync.state is SyncState.idle


def test_release_after_detach_is_harmless(sync, raw_view, scheduler):
    """Views unmounted before the tick: the deferred release completes without error."""
    raw_view.user_scroll(100)
    sync.detach()
    scheduler.run_pending()
    assert sync.state is SyncState.idle
    assert sync.on_raw_scroll() is False


def test_guards_are_per_instance(prefs, make_view):
    """Two editors never share an in-flight guard."""
    sched = TickScheduler()
    a_raw, a_ren = make_view(2000, 500), make_view(2000, 500)
    b_raw, b_ren = make_view(2000, 500), make_view(2000, 500)
    a = ScrollSynchronizer(a_raw, a_ren, prefs, sched)
    b = ScrollSynchronizer(b_raw, b_ren, prefs, sched)
    assert a.on_raw_scroll() is True
    assert b.on_raw_scroll() is True
    assert a.state is SyncState.propagating and b.state is SyncState.propagating


def test_tick_scheduler_defers_nested_callbacks():
    """Callbacks scheduled while draining wait for the following tick."""
    sched = TickScheduler()
    seen = []
    sched.call_soon(lambda: (seen.append(1), sched.call_soon(lambda: seen.append(2))))
    assert sched.run_pending() == 1
    assert seen == [1]
    assert sched.run_pending() == 1
    assert seen == [1, 2]


def test_asyncio_scheduler_releases_on_next_loop_iteration(raw_view, rendered_view, prefs):
    async def scenario():
        sync = ScrollSynchronizer(raw_view, rendered_view, prefs, AsyncioScheduler())
        sync.on_raw_scroll()
        assert sync.state is SyncState.propagating
        await asyncio.sleep(0)
        return sync.state

    assert asyncio.run(scenario()) is SyncState.idle


class _TornDownView:
    """Destination whose scroll write fails, as a view mid-teardown might."""
    content_height = 2000
    viewport_height = 500
    scroll_offset = 0.0

    def scroll_to(self, offset: float) -> None:
        raise RuntimeError("view is gone")


def test_failed_destination_write_still_releases(raw_view, prefs, scheduler):
    """A raising scroll_to propagates but the guard returns to idle on the next tick."""
    sync = ScrollSynchronizer(raw_view, _TornDownView(), prefs, scheduler)
    raw_view.scroll_offset = 750
    with pytest.raises(RuntimeError):
        sync.on_raw_scroll()
    assert sync.state is SyncState.propagating
    assert scheduler.run_pending() == 1
    assert sync.state is SyncState.idle
    with pytest.raises(RuntimeError):
        sync.on_raw_scroll()


def test_qt_scheduler_releases_on_next_event_loop_turn(raw_view, rendered_view, prefs):
    QtCore = pytest.importorskip("PySide6.QtCore")
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    sync = ScrollSynchronizer(raw_view, rendered_view, prefs, QtScheduler())
    assert sync.on_raw_scroll() is True
    assert sync.state is SyncState.propagating

    loop = QtCore.QEventLoop()
    QtCore.QTimer.singleShot(50, loop.quit)
    loop.exec()
    assert sync.state is SyncState.idle
    assert app is not None
