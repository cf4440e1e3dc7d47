"""Ratio-based scroll synchronization between the raw editor view and the rendered view

The synchronizer is a two-state machine per view pair:

    Idle --scroll event from view V (sync enabled, split mode)--> Propagating(V)
    Propagating(V) --next scheduler tick after the mirrored write--> Idle

While Propagating, every scroll event is dropped, including the echo the
mirrored write raises on the destination view. Under fast scrolling some
intermediate positions are therefore skipped; the last event after release
wins.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from mdworkspace.core.models import ViewMode


logger = logging.getLogger(__name__)


class ScrollView(Protocol):
    """Host handle for one scrollable surface."""
    scroll_offset: float
    content_height: float
    viewport_height: float

    def scroll_to(self, offset: float) -> None: ...


class SyncPreferences(Protocol):
    sync_scroll: bool
    view_mode: ViewMode


class Scheduler(Protocol):
    def call_soon(self, callback: Callable[[], None]) -> None: ...


class TickScheduler:
    """Queue callbacks until the host drains them once per event-loop tick."""

    def __init__(self):
        self._pending: deque[Callable[[], None]] = deque()

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    def run_pending(self) -> int:
        """Run callbacks queued before this call; ones they schedule wait for the next tick."""
        count = len(self._pending)
        for _ in range(count):
            self._pending.popleft()()
        return count

    def __len__(self) -> int:
        return len(self._pending)


class AsyncioScheduler:
    """Defer callbacks to the next iteration of an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_soon(self, callback: Callable[[], None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_soon(callback)


class QtScheduler:
    """Defer callbacks to the next Qt event-loop turn (QTimer.singleShot(0, ...)).

    Requires the `qt` extra (PySide6) and a running QApplication.
    """

    def call_soon(self, callback: Callable[[], None]) -> None:
        from PySide6.QtCore import QTimer
        QTimer.singleShot(0, callback)


def scroll_ratio(offset: float, content_height: float, viewport_height: float) -> float:
    """Fraction of the scrollable range travelled, clamped to [0, 1]."""
    ratio = offset / max(1.0, content_height - viewport_height)
    return min(1.0, max(0.0, ratio))


def target_offset(ratio: float, content_height: float, viewport_height: float) -> float:
    return ratio * max(0.0, content_height - viewport_height)


class SyncState(str, Enum):
    idle = "idle"
    propagating = "propagating"


@dataclass
class _Pair:
    raw: ScrollView | None
    rendered: ScrollView | None


class ScrollSynchronizer:
    """Mirror scroll position between raw and rendered views of one document.

    One instance per editor; the in-flight guard is never shared between
    instances.
    """

    def __init__(
        self,
        raw_view: ScrollView,
        rendered_view: ScrollView,
        preferences: SyncPreferences,
        scheduler: Scheduler,
        ):
        self._views = _Pair(raw=raw_view, rendered=rendered_view)
        self._prefs = preferences
        self._scheduler = scheduler
        self.state = SyncState.idle
        self.source: ScrollView | None = None

    @property
    def enabled(self) -> bool:
        return bool(self._prefs.sync_scroll) and ViewMode(self._prefs.view_mode) == ViewMode.split

    def on_raw_scroll(self) -> bool:
        return self.on_scroll(self._views.raw)

    def on_rendered_scroll(self) -> bool:
        return self.on_scroll(self._views.rendered)

    def on_scroll(self, source: ScrollView | None) -> bool:
        """Handle a scroll event from source; True if the other view was moved."""
        if not self.enabled or self.state is SyncState.propagating:
            return False
        dest = self._counterpart(source)
        if dest is None:
            return False

        self.state = SyncState.propagating
        self.source = source
        ratio = scroll_ratio(source.scroll_offset, source.content_height, source.viewport_height)
        try:
            dest.scroll_to(target_offset(ratio, dest.content_height, dest.viewport_height))
        finally:
            # release even if the write raises
            self._scheduler.call_soon(self._release)
        return True

    def detach(self) -> None:
        """Forget both views (host unmounted them); a pending release still completes."""
        self._views = _Pair(raw=None, rendered=None)

    def _counterpart(self, view: ScrollView | None) -> ScrollView | None:
        if view is None:
            return None
        if view is self._views.raw:
            return self._views.rendered
        if view is self._views.rendered:
            return self._views.raw
        logger.debug("Scroll event from a view this synchronizer does not own")
        return None

    def _release(self) -> None:
        self.state = SyncState.idle
        self.source = None
