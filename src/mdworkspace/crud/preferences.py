"""Persisted editor preferences (line numbers, scroll sync, toolbar)"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from mdworkspace.core.models import EditorPreferences, ViewMode
from mdworkspace.crud.storage import Storage


logger = logging.getLogger(__name__)

PREFERENCES_KEY = "md-editor-settings"


def load_preferences(storage: Storage, key: str = PREFERENCES_KEY) -> EditorPreferences:
    """Read stored preferences; missing, corrupt or unreadable payloads yield defaults."""
    try:
        raw = storage.load(key)
    except Exception:
        logger.exception("Could not read %s from storage", key)
        return EditorPreferences()
    if raw is None:
        return EditorPreferences()
    try:
        return EditorPreferences.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Discarding unreadable editor preferences (%d errors)", e.error_count())
        return EditorPreferences()


def save_preferences(storage: Storage, prefs: EditorPreferences, key: str = PREFERENCES_KEY) -> None:
    storage.save(key, prefs.model_dump_json(by_alias=True))


class PreferencesStore:
    """Holds the live EditorPreferences and writes persisted toggles through to storage.

    A failed write is logged; the in-memory preferences stay as changed.
    """

    def __init__(self, storage: Storage, key: str = PREFERENCES_KEY):
        self._storage = storage
        self._key = key
        self.current = load_preferences(storage, key)

    @property
    def sync_scroll(self) -> bool:
        return self.current.sync_scroll

    @property
    def view_mode(self) -> ViewMode:
        return self.current.view_mode

    def update(self, **changes) -> EditorPreferences:
        """Apply field changes; persist unless only the session-only view_mode changed."""
        self.current = self.current.model_copy(update=changes)
        if set(changes) - {"view_mode"}:
            self._persist()
        return self.current

    def set_view_mode(self, mode: ViewMode | str) -> None:
        self.update(view_mode=ViewMode(mode))

    def toggle(self, name: str) -> bool:
        """Flip a boolean preference and return its new value."""
        value = not getattr(self.current, name)
        self.update(**{name: value})
        return value

    def _persist(self) -> None:
        try:
            save_preferences(self._storage, self.current, self._key)
        except Exception:
            logger.exception("Could not write %s to storage", self._key)
