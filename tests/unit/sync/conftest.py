"""Shared fixtures and fake host views for sync unit tests"""

from dataclasses import dataclass, field

import pytest

from mdworkspace.core.models import EditorPreferences
from mdworkspace.sync.scroll import ScrollSynchronizer, TickScheduler


@dataclass
class FakeScrollView:
    """Scrollable surface that records writes; with a synchronizer attached, writes echo a scroll event."""
    content_height: float
    viewport_height: float
    scroll_offset: float = 0.0
    writes: list[float] = field(default_factory=list)
    on_scroll: object = None

    def scroll_to(self, offset: float) -> None:
        self.writes.append(offset)
        self.scroll_offset = offset
        if self.on_scroll is not None:
            self.on_scroll()

    def user_scroll(self, offset: float):
        self.scroll_offset = offset
        return self.on_scroll() if self.on_scroll is not None else None


@dataclass
class FakeAnchor:
    calls: list[tuple] = field(default_factory=list)

    def scroll_into_view(self, smooth: bool = True, align: str = "start") -> None:
        self.calls.append((smooth, align))


@dataclass
class FakeRenderedView:
    anchors: dict[str, FakeAnchor] = field(default_factory=dict)

    def find_anchor(self, element_id: str):
        return self.anchors.get(element_id)


@dataclass
class FakeRawView:
    focused: bool = False
    selection: tuple | None = None
    offset: float | None = None

    def focus(self) -> None:
        self.focused = True

    def set_selection(self, start: int, end: int) -> None:
        self.selection = (start, end)

    def scroll_to(self, offset: float) -> None:
        self.offset = offset


@pytest.fixture(name="raw_view")
def raw_view_fixture():
    return FakeScrollView(content_height=2000, viewport_height=500)


@pytest.fixture(name="rendered_view")
def rendered_view_fixture():
    return FakeScrollView(content_height=4000, viewport_height=500)


@pytest.fixture(name="prefs")
def prefs_fixture():
    return EditorPreferences()


@pytest.fixture(name="scheduler")
def scheduler_fixture():
    return TickScheduler()


@pytest.fixture(name="sync")
def sync_fixture(raw_view, rendered_view, prefs, scheduler):
    """Synchronizer wired so each view's scroll events feed back into it, like a real host."""
    s = ScrollSynchronizer(raw_view, rendered_view, prefs, scheduler)
    raw_view.on_scroll = s.on_raw_scroll
    rendered_view.on_scroll = s.on_rendered_scroll
    return s


@pytest.fixture(name="make_view")
def make_view_fixture():
    """Factory for extra, unwired scroll views."""
    return FakeScrollView


@pytest.fixture(name="raw_surface")
def raw_surface_fixture():
    return FakeRawView()


@pytest.fixture(name="anchor")
def anchor_fixture():
    return FakeAnchor()


@pytest.fixture(name="make_rendered")
def make_rendered_fixture():
    """Build a rendered view exposing the given {id: anchor} map."""
    return lambda anchors=None: FakeRenderedView(dict(anchors or {}))
