"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdworkspace.config import Settings, load_config
from mdworkspace.core.models import Document
from mdworkspace.core.outline import index_headings
from mdworkspace.core.render import MarkdownItRenderer, RenderError
from mdworkspace.core.stats import content_preview, document_stats
from mdworkspace.crud.database import init_db, make_engine
from mdworkspace.crud.sql_storage import SQLStorage
from mdworkspace.crud.store import DocumentStore
from mdworkspace.crud.transfer import export_file, import_files


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging from it."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail("Invalid configuration", e)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s", force=True)
    return settings


def _workspace(settings: Settings) -> DocumentStore:
    """Open the SQL-backed workspace named by settings.db_url."""
    engine = make_engine(settings.db_url)
    init_db(engine)
    return DocumentStore(
        SQLStorage(engine),
        documents_key=settings.documents_key,
        active_key=settings.active_key,
        default_title=settings.default_title,
        placeholder=settings.placeholder,
    )


def _resolve(store: DocumentStore, doc_id: Optional[str]) -> Document:
    """Return the named document, or the active one when doc_id is None."""
    if doc_id is None:
        return store.active
    doc = store.get(doc_id)
    if doc is None:
        _fail(f"No document with id '{doc_id}'")
    return doc


def _echo_doc(doc: Document, active_id: str) -> None:
    marker = "*" if doc.id == active_id else " "
    typer.echo(f"{marker} {doc.id}  {doc.title}  -  {content_preview(doc.content)}")


def list_cmd():
    """List documents, most recently created first; '*' marks the active one."""
    store = _workspace(_settings())
    for doc in store.list():
        _echo_doc(doc, store.active_id)


def new_cmd(
    title: Annotated[Optional[str], typer.Argument(help="Title for the new document")] = None,
    ):
    """Create a document and make it active."""
    store = _workspace(_settings())
    doc = store.create(title.strip() if title else None)
    typer.echo(f"Created {doc.id}: {doc.title}")


def show_cmd(
    doc_id: Annotated[Optional[str], typer.Argument(help="Document id; defaults to the active document")] = None,
    ):
    """Print a document's raw content."""
    store = _workspace(_settings())
    typer.echo(_resolve(store, doc_id).content, nl=False)


def rename_cmd(
    doc_id: Annotated[str, typer.Argument(help="Document id")],
    title: Annotated[str, typer.Argument(help="New title")],
    ):
    """Rename a document."""
    store = _workspace(_settings())
    doc = _resolve(store, doc_id)
    title = title.strip()
    if not title:
        _fail("Title cannot be empty")
    store.rename(doc.id, title)
    typer.echo(f"Renamed {doc.id}: {doc.title} -> {title}")


def delete_cmd(
    doc_id: Annotated[str, typer.Argument(help="Document id")],
    ):
    """Delete a document; deleting the last one leaves a fresh empty document."""
    store = _workspace(_settings())
    doc = _resolve(store, doc_id)
    store.delete(doc.id)
    typer.echo(f"Deleted {doc.id}: {doc.title}")
    typer.echo(f"Active: {store.active_id}")


def duplicate_cmd(
    doc_id: Annotated[str, typer.Argument(help="Document id")],
    ):
    """Copy a document under '<title> (Copy)' and make the copy active."""
    store = _workspace(_settings())
    copy = store.duplicate(_resolve(store, doc_id).id)
    typer.echo(f"Created {copy.id}: {copy.title}")


def select_cmd(
    doc_id: Annotated[str, typer.Argument(help="Document id")],
    ):
    """Make a document the active one."""
    store = _workspace(_settings())
    store.set_active(_resolve(store, doc_id).id)
    typer.echo(f"Active: {store.active_id}")


def search_cmd(
    query: Annotated[str, typer.Argument(help="Case-insensitive text to find in titles or content")],
    ):
    """List documents whose title or content contains the query."""
    store = _workspace(_settings())
    matches = store.search(query)
    if not matches:
        typer.echo("No matching documents.")
        raise typer.Exit(1)
    for doc in matches:
        _echo_doc(doc, store.active_id)


def import_cmd(
    paths: Annotated[list[Path], typer.Argument(exists=True, dir_okay=False, readable=True, help=".md/.markdown/.txt files")],
    ):
    """Import files as new documents titled after their file names."""
    store = _workspace(_settings())
    try:
        docs = import_files(store, paths)
    except (OSError, UnicodeDecodeError) as e:
        _fail("Import failed", e)
    if not docs:
        typer.echo("No .md/.markdown/.txt files given.")
        raise typer.Exit(1)
    for doc in docs:
        typer.echo(f"  {doc.title} -> {doc.id}")
    typer.echo(f"Imported {len(docs)} document(s)")


def export_cmd(
    doc_id: Annotated[Optional[str], typer.Argument(help="Document id; defaults to the active document")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Write a document's content to <out-dir>/<title>.md."""
    settings = _settings(overrides={"export_dir": out})
    store = _workspace(settings)
    doc = _resolve(store, doc_id)
    try:
        dest = export_file(store, doc.id, Path(settings.export_dir))
    except OSError as e:
        _fail("Export failed", e)
    typer.echo(f"  {doc.id} -> {dest}")


def outline_cmd(
    doc_id: Annotated[Optional[str], typer.Argument(help="Document id; defaults to the active document")] = None,
    ):
    """Print the heading outline with the ids the preview carries."""
    store = _workspace(_settings())
    headings = index_headings(_resolve(store, doc_id).content)
    if not headings:
        typer.echo("No headings.")
        return
    for h in headings:
        typer.echo(f"{'  ' * (h.level - 1)}{h.text or '(empty)'}  [{h.id}]  line {h.line + 1}")


def render_cmd(
    doc_id: Annotated[Optional[str], typer.Argument(help="Document id; defaults to the active document")] = None,
    out: Annotated[Optional[Path], typer.Option("--out", "-o", help="Write HTML here instead of stdout")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Render a document to HTML with outline ids on its headings."""
    settings = _settings(overrides={"parser_config": parser})
    store = _workspace(settings)
    doc = _resolve(store, doc_id)
    try:
        html = MarkdownItRenderer(settings.parser_config).render(doc.content)
    except (ValueError, RenderError) as e:
        _fail("Render failed", e)
    if out is None:
        typer.echo(html, nl=False)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(html, encoding="utf-8")
    typer.echo(f"  {doc.id} -> {out}")


def stats_cmd(
    doc_id: Annotated[Optional[str], typer.Argument(help="Document id; defaults to the active document")] = None,
    ):
    """Print word count, character count and estimated read time."""
    store = _workspace(_settings())
    stats = document_stats(_resolve(store, doc_id).content)
    typer.echo(f"{stats.words} words, {stats.characters} characters, {stats.read_minutes} min read")
