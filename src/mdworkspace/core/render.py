"""Reference renderer: markdown-it HTML with outline ids attached to heading elements"""

import logging
from typing import Protocol

from markdown_it import MarkdownIt

from mdworkspace.core.outline import index_headings


logger = logging.getLogger(__name__)


class RenderError(Exception):
    """The renderer could not display the given text. Raw content is unaffected."""


class Renderer(Protocol):
    def render(self, text: str) -> str: ...


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


class MarkdownItRenderer:
    """Render markdown to HTML, tagging each indexed heading with its outline id.

    Ids are matched by source line (token.map[0] == HeadingEntry.line), so a
    heading the indexer does not know about (setext, indented, quoted) is
    rendered without an id rather than shifting the ids of later headings.
    """

    def __init__(self, preset: str = "gfm-like"):
        try:
            self._md = _make_parser(preset)
        except KeyError as e:
            raise ValueError(f"Unknown MarkdownIt preset: {preset}") from e

    def render(self, text: str) -> str:
        by_line = {entry.line: entry for entry in index_headings(text)}
        try:
            env: dict = {}
            tokens = self._md.parse(text, env)
            for tok in tokens:
                if tok.type == "heading_open" and tok.map:
                    entry = by_line.get(tok.map[0])
                    if entry is not None:
                        tok.attrSet("id", entry.id)
            return self._md.renderer.render(tokens, self._md.options, env)
        except Exception as e:
            logger.warning("Render failed: %s", e)
            raise RenderError(str(e)) from e
