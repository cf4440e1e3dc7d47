"""Document workspace: ordered document list, active selection, write-through persistence

In-memory state is the source of truth for the session; every successful
mutation re-serializes the full list to storage afterwards. The workspace is
never empty and the active id always names a document in the list.
"""

from __future__ import annotations

import json
import logging
import secrets
import string
import time
from typing import Callable

from pydantic import TypeAdapter, ValidationError

from mdworkspace.core.models import Document
from mdworkspace.crud.storage import Storage


logger = logging.getLogger(__name__)

DOCUMENTS_KEY = "markdown-editor-files"
ACTIVE_KEY = "markdown-editor-active"
DEFAULT_TITLE = "Untitled"
PLACEHOLDER = "Start writing here..."
WELCOME_TITLE = "Welcome"
WELCOME_CONTENT = """\
# Welcome to the Markdown Editor

Write **GitHub Flavored Markdown** on the left and watch the live preview on the right.

## Features

- **Documents**: create, open, rename, duplicate and delete
- **Search**: find documents by title or content
- **Preview**: split view with synchronized scrolling
- **Outline**: jump to any heading in the document

## Markdown Syntax

### Text Formatting

**Bold text**, *italic text*, ~~strikethrough~~, `inline code`

### Lists

- Item one
- Item two
  - Nested item

1. First step
2. Second step

### Code

```python
def fibonacci(n):
    return n if n <= 1 else fibonacci(n - 1) + fibonacci(n - 2)
```

### Table

| Feature | Shortcut |
| ------- | -------- |
| Bold    | Ctrl+B   |
| Italic  | Ctrl+I   |

### Checklist

- [x] Write the editor
- [ ] Export to PDF

---

Happy writing!
"""

_DOCUMENT_LIST = TypeAdapter(list[Document])
_BASE36 = string.digits + string.ascii_lowercase


def _now_ms() -> int:
    return int(time.time() * 1000)


def _base36(n: int) -> str:
    out = ""
    while True:
        n, r = divmod(n, 36)
        out = _BASE36[r] + out
        if n == 0:
            return out


class DocumentStore:
    """Authoritative collection of documents plus the active-selection pointer."""

    def __init__(
        self,
        storage: Storage,
        *,
        documents_key: str = DOCUMENTS_KEY,
        active_key: str = ACTIVE_KEY,
        default_title: str = DEFAULT_TITLE,
        placeholder: str = PLACEHOLDER,
        clock: Callable[[], int] = _now_ms,
        ):
        self._storage = storage
        self._documents_key = documents_key
        self._active_key = active_key
        self._default_title = default_title
        self._placeholder = placeholder
        self._clock = clock
        self._docs: list[Document] = []

        loaded = self._load_documents()
        if loaded:
            self._docs = loaded
        else:
            self._docs = [self._new_document(WELCOME_TITLE, WELCOME_CONTENT)]
            logger.info("Seeded workspace with a %r document", WELCOME_TITLE)
            self._persist_documents()

        saved_active = self._load_active_id()
        if saved_active is not None and self._index(saved_active) is not None:
            self._active_id = saved_active
        else:
            self._active_id = self._docs[0].id
            self._persist_active()

    # --- queries ---

    def list(self) -> list[Document]:
        """All documents, most recently created first."""
        return [d.model_copy() for d in self._docs]

    def get(self, doc_id: str) -> Document | None:
        i = self._index(doc_id)
        return self._docs[i].model_copy() if i is not None else None

    @property
    def active_id(self) -> str:
        return self._active_id

    @property
    def active(self) -> Document:
        return self._docs[self._index(self._active_id)].model_copy()

    def search(self, query: str) -> list[Document]:
        """Case-insensitive substring match on title or content; blank query returns everything."""
        if not query.strip():
            return self.list()
        needle = query.lower()
        return [
            d.model_copy() for d in self._docs
            if needle in d.title.lower() or needle in d.content.lower()
        ]

    # --- mutations ---

    def create(self, title: str | None = None) -> Document:
        """Insert a seeded document at the front and make it active."""
        title = title if title and title.strip() else self._default_title
        return self.add(title, f"# {title}\n\n{self._placeholder}\n")

    def add(self, title: str, content: str) -> Document:
        """Insert a document with verbatim content at the front and make it active."""
        doc = self._new_document(title, content)
        self._docs.insert(0, doc)
        self._persist_documents()
        self._select(doc.id)
        return doc.model_copy()

    def update_content(self, doc_id: str, content: str) -> None:
        i = self._index(doc_id)
        if i is None:
            logger.debug("update_content: unknown id %s", doc_id)
            return
        doc = self._docs[i]
        self._docs[i] = doc.model_copy(update={"content": content, "updated_at": self._next_stamp(doc)})
        self._persist_documents()

    def rename(self, doc_id: str, title: str) -> None:
        """Set a new title; blank titles are ignored (callers trim before calling)."""
        i = self._index(doc_id)
        if i is None or not title.strip():
            logger.debug("rename: ignored for id %s", doc_id)
            return
        doc = self._docs[i]
        self._docs[i] = doc.model_copy(update={"title": title, "updated_at": self._next_stamp(doc)})
        self._persist_documents()

    def delete(self, doc_id: str) -> None:
        """Remove a document; an emptied workspace is refilled with one fresh default document."""
        i = self._index(doc_id)
        if i is None:
            logger.debug("delete: unknown id %s", doc_id)
            return
        del self._docs[i]
        if not self._docs:
            title = self._default_title
            self._docs.append(self._new_document(title, f"# {title}\n\n{self._placeholder}\n"))
        self._persist_documents()
        if self._index(self._active_id) is None:
            self._select(self._docs[0].id)

    def duplicate(self, doc_id: str) -> Document | None:
        source = self.get(doc_id)
        if source is None:
            logger.debug("duplicate: unknown id %s", doc_id)
            return None
        return self.add(f"{source.title} (Copy)", source.content)

    def set_active(self, doc_id: str) -> None:
        if self._index(doc_id) is None:
            logger.debug("set_active: unknown id %s", doc_id)
            return
        self._select(doc_id)

    # --- internals ---

    def _index(self, doc_id: str) -> int | None:
        for i, d in enumerate(self._docs):
            if d.id == doc_id:
                return i
        return None

    def _select(self, doc_id: str) -> None:
        if doc_id != self._active_id:
            self._active_id = doc_id
            self._persist_active()

    def _generate_id(self) -> str:
        while True:
            suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
            candidate = _base36(self._clock()) + suffix
            if self._index(candidate) is None:
                return candidate

    def _new_document(self, title: str, content: str) -> Document:
        now = self._clock()
        return Document(id=self._generate_id(), title=title, content=content, created_at=now, updated_at=now)

    def _next_stamp(self, doc: Document) -> int:
        """Current time, never earlier than the document's last stamp."""
        return max(self._clock(), doc.updated_at)

    def _load_documents(self) -> list[Document] | None:
        try:
            raw = self._storage.load(self._documents_key)
        except Exception:
            logger.exception("Could not read %s from storage", self._documents_key)
            return None
        if raw is None:
            return None
        try:
            return _DOCUMENT_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable document list (%d errors)", e.error_count())
            return None

    def _load_active_id(self) -> str | None:
        try:
            return self._storage.load(self._active_key)
        except Exception:
            logger.exception("Could not read %s from storage", self._active_key)
            return None

    def _persist_documents(self) -> None:
        payload = json.dumps([d.model_dump(by_alias=True) for d in self._docs], ensure_ascii=False)
        try:
            self._storage.save(self._documents_key, payload)
        except Exception:
            logger.exception("Could not write %s to storage", self._documents_key)

    def _persist_active(self) -> None:
        try:
            self._storage.save(self._active_key, self._active_id)
        except Exception:
            logger.exception("Could not write %s to storage", self._active_key)
