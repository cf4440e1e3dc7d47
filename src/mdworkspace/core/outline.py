"""Heading outline indexing: raw markdown text -> ordered HeadingEntry list

Single pass over lines. ATX headings only (`# Title` .. `###### Title`);
lines inside fenced code blocks are never headings, so diagram and code
fences cannot leak entries into the outline.
"""

import re

from mdworkspace.core.models import HeadingEntry
from mdworkspace.core.utils.slug import slugify


HEADING_RE = re.compile(r'^(#{1,6})\s+(.+)$')
FENCE_RE = re.compile(r'^ {0,3}(`{3,}|~{3,})')
INLINE_MARKERS_RE = re.compile(r'[*_`~\[\]()#]')


def strip_inline_markers(text: str) -> str:
    """Remove emphasis, strikethrough, code, link/image and literal '#' markers, then trim."""
    return INLINE_MARKERS_RE.sub('', text).strip()


def heading_id(text: str, ordinal: int) -> str:
    """Build the outline identifier for the ordinal-th heading of a pass."""
    return f"heading-{slugify(text)}-{ordinal}"


def _iter_lines(text: str):
    """Yield (line_no, line) with fenced block bodies (and their fences) skipped."""
    fence: str | None = None
    for line_no, line in enumerate(text.split('\n')):
        line = line.rstrip('\r')
        m = FENCE_RE.match(line)
        if fence is None:
            if m:
                fence = m.group(1)
                continue
            yield line_no, line
        elif m and m.group(1)[0] == fence[0] and len(m.group(1)) >= len(fence) \
                and not line[m.end():].strip():
            fence = None


def index_headings(text: str) -> list[HeadingEntry]:
    """Return every heading in text, in document order, with pass-unique ids."""
    entries: list[HeadingEntry] = []
    for line_no, line in _iter_lines(text):
        m = HEADING_RE.match(line)
        if not m:
            continue
        label = strip_inline_markers(m.group(2))
        entries.append(HeadingEntry(
            level=len(m.group(1)),
            text=label,
            id=heading_id(label, len(entries)),
            line=line_no,
        ))
    return entries


def find_heading(text: str, target_id: str) -> HeadingEntry | None:
    """Re-index text and return the entry carrying target_id, or None."""
    for entry in index_headings(text):
        if entry.id == target_id:
            return entry
    return None
