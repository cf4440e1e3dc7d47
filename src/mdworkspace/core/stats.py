"""Document statistics and sidebar preview text"""

import math
import re
from dataclasses import dataclass


WORDS_PER_MINUTE = 200
PREVIEW_MARKERS_RE = re.compile(r'[*_`~\[\]()#>-]')


@dataclass(frozen=True)
class DocumentStats:
    words:        int
    characters:   int
    read_minutes: int


def document_stats(content: str) -> DocumentStats:
    words = len(content.split())
    return DocumentStats(
        words=words,
        characters=len(content),
        read_minutes=max(1, math.ceil(words / WORDS_PER_MINUTE)),
    )


def content_preview(content: str, limit: int = 80) -> str:
    """First two non-blank, non-heading lines with markers removed; truncated to limit."""
    lines = [l for l in content.split('\n') if l.strip() and not l.startswith('#')]
    text = PREVIEW_MARKERS_RE.sub('', ' '.join(lines[:2])).strip()
    if len(text) > limit:
        return text[:limit] + '...'
    return text or 'Empty document'
