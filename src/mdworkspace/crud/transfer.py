"""File import/export: raw markdown in and out of the workspace, content passed through untouched"""

import logging
import re
from pathlib import Path
from typing import Iterable

from mdworkspace.core.models import Document
from mdworkspace.crud.store import DocumentStore


logger = logging.getLogger(__name__)

IMPORT_EXTENSIONS = {'.md', '.markdown', '.txt'}
TITLE_SUFFIX_RE = re.compile(r'\.(md|markdown|txt)$')
UNSAFE_FILENAME_RE = re.compile(r'[\\/\x00]')


def title_from_filename(name: str) -> str:
    """Strip a trailing .md/.markdown/.txt extension from a file name."""
    return TITLE_SUFFIX_RE.sub('', name)


def import_file(store: DocumentStore, path: Path) -> Document:
    """Add path's content as a new active document titled after the file."""
    path = Path(path)
    content = path.read_bytes().decode('utf-8')
    doc = store.add(title_from_filename(path.name), content)
    logger.info("Imported %s as %s", path, doc.id)
    return doc


def import_files(store: DocumentStore, paths: Iterable[Path]) -> list[Document]:
    """Import every accepted file in order; other extensions are skipped."""
    imported = []
    for p in map(Path, paths):
        if p.suffix.lower() not in IMPORT_EXTENSIONS:
            logger.debug("Skipping unsupported file %s", p)
            continue
        imported.append(import_file(store, p))
    return imported


def export_filename(title: str) -> str:
    """File name for an exported document; path separators in the title become '_'."""
    return f"{UNSAFE_FILENAME_RE.sub('_', title)}.md"


def export_file(store: DocumentStore, doc_id: str, out_dir: Path) -> Path | None:
    """Write a document's content verbatim to out_dir/<title>.md; None for an unknown id."""
    doc = store.get(doc_id)
    if doc is None:
        return None
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    dest = out_dir / export_filename(doc.title)
    dest.write_bytes(doc.content.encode('utf-8'))
    return dest
