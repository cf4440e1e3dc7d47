"""Editor session: wires store, preferences, renderer, scroll sync and outline navigation for one host editor"""

from __future__ import annotations

import logging
from typing import Protocol

from mdworkspace.config import Settings
from mdworkspace.core.models import HeadingEntry
from mdworkspace.core.outline import index_headings
from mdworkspace.core.render import MarkdownItRenderer, Renderer, RenderError
from mdworkspace.crud.preferences import PreferencesStore
from mdworkspace.crud.storage import Storage
from mdworkspace.crud.store import DocumentStore
from mdworkspace.sync.navigator import NavigationResult, OutlineNavigator, RawSurface, RenderedSurface
from mdworkspace.sync.scroll import Scheduler, ScrollSynchronizer, ScrollView, TickScheduler


logger = logging.getLogger(__name__)


class RawEditorView(ScrollView, RawSurface, Protocol):
    """The host's plain-text editing surface."""


class RenderedPane(ScrollView, RenderedSurface, Protocol):
    """The host's rendered preview surface."""


class EditorSession:
    """One editor instance over a shared storage.

    Edits go to the store first; rendering and outline are derived from the
    stored content afterwards, so a render failure never loses text.
    """

    def __init__(
        self,
        settings: Settings,
        storage: Storage,
        raw_view: RawEditorView | None = None,
        rendered_view: RenderedPane | None = None,
        scheduler: Scheduler | None = None,
        renderer: Renderer | None = None,
        ):
        self.store = DocumentStore(
            storage,
            documents_key=settings.documents_key,
            active_key=settings.active_key,
            default_title=settings.default_title,
            placeholder=settings.placeholder,
        )
        self.preferences = PreferencesStore(storage, settings.preferences_key)
        self.renderer = renderer or MarkdownItRenderer(settings.parser_config)
        self.scheduler = scheduler or TickScheduler()
        self.sync = ScrollSynchronizer(raw_view, rendered_view, self.preferences, self.scheduler)
        self.navigator = OutlineNavigator(
            raw_view=raw_view,
            rendered_view=rendered_view,
            line_height=settings.line_height,
            scroll_margin=settings.scroll_margin,
        )

    @property
    def content(self) -> str:
        return self.store.active.content

    def edit(self, content: str) -> str | None:
        """Store new content for the active document; return the fresh rendering or None on failure."""
        self.store.update_content(self.store.active_id, content)
        return self.render()

    def render(self) -> str | None:
        try:
            return self.renderer.render(self.content)
        except RenderError:
            logger.warning("Preview unavailable for %s", self.store.active_id)
            return None

    def outline(self) -> list[HeadingEntry]:
        return index_headings(self.content)

    def navigate(self, heading_id: str) -> NavigationResult:
        return self.navigator.navigate(heading_id, self.content)

    def close(self) -> None:
        """Host unmounted its views; drop them so pending sync releases touch nothing."""
        self.sync.detach()
        self.navigator.raw_view = None
        self.navigator.rendered_view = None
