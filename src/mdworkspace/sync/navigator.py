"""Outline navigation: resolve a heading id to a scroll target in whichever view is showing"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from mdworkspace.core.models import HeadingEntry
from mdworkspace.core.outline import find_heading


logger = logging.getLogger(__name__)

DEFAULT_LINE_HEIGHT = 1.75 * 13.6
DEFAULT_SCROLL_MARGIN = 100.0


class Anchor(Protocol):
    def scroll_into_view(self, smooth: bool = True, align: str = "start") -> None: ...


class RenderedSurface(Protocol):
    def find_anchor(self, element_id: str) -> Anchor | None: ...


class RawSurface(Protocol):
    def focus(self) -> None: ...
    def set_selection(self, start: int, end: int) -> None: ...
    def scroll_to(self, offset: float) -> None: ...


class NavigationTarget(str, Enum):
    rendered = "rendered"
    raw = "raw"
    none = "none"


@dataclass(frozen=True)
class NavigationResult:
    target:  NavigationTarget
    heading: HeadingEntry | None = None
    caret:   int | None = None
    offset:  float | None = None


def line_start_offset(text: str, line: int) -> int:
    """Character offset of the first character of a zero-based line."""
    return sum(len(l) + 1 for l in text.split('\n')[:line])


class OutlineNavigator:
    """Jump to a heading: by element id in the rendered view, else by estimated line in the raw view.

    The raw-view fallback is an approximation; the line height is a fixed
    estimate, which holds for a plain-text surface without per-line height
    variance.
    """

    def __init__(
        self,
        raw_view: RawSurface | None = None,
        rendered_view: RenderedSurface | None = None,
        line_height: float = DEFAULT_LINE_HEIGHT,
        scroll_margin: float = DEFAULT_SCROLL_MARGIN,
        ):
        self.raw_view = raw_view
        self.rendered_view = rendered_view
        self.line_height = line_height
        self.scroll_margin = scroll_margin

    def navigate(self, heading_id: str, content: str) -> NavigationResult:
        if self.rendered_view is not None:
            anchor = self.rendered_view.find_anchor(heading_id)
            if anchor is not None:
                anchor.scroll_into_view(smooth=True, align="start")
                return NavigationResult(NavigationTarget.rendered)

        if self.raw_view is None:
            logger.debug("No view can show heading %s", heading_id)
            return NavigationResult(NavigationTarget.none)

        entry = find_heading(content, heading_id)
        if entry is None:
            logger.debug("Heading %s not found in current content", heading_id)
            return NavigationResult(NavigationTarget.none)

        caret = line_start_offset(content, entry.line)
        offset = max(0.0, entry.line * self.line_height - self.scroll_margin)
        self.raw_view.focus()
        self.raw_view.set_selection(caret, caret)
        self.raw_view.scroll_to(offset)
        return NavigationResult(NavigationTarget.raw, heading=entry, caret=caret, offset=offset)
