"""Workspace data models: persisted documents, derived heading entries, editor preferences"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """A single markdown document; the persisted unit of the workspace."""
    model_config = ConfigDict(populate_by_name=True)

    id:         str
    title:      str
    content:    str
    created_at: int = Field(..., alias="createdAt", ge=0, description="Epoch milliseconds")
    updated_at: int = Field(..., alias="updatedAt", ge=0, description="Epoch milliseconds")


class ViewMode(str, Enum):
    """Which of the two views the host currently shows"""
    split = "split"
    editor = "editor"
    preview = "preview"


class EditorPreferences(BaseModel):
    """Per-user editor toggles; view_mode is session-only and never persisted."""
    model_config = ConfigDict(populate_by_name=True)

    show_line_numbers: bool = Field(default=False, alias="showLineNumbers")
    sync_scroll:       bool = Field(default=True,  alias="syncScroll")
    toolbar_visible:   bool = Field(default=True,  alias="toolbarVisible")
    view_mode:         ViewMode = Field(default=ViewMode.split, exclude=True)


@dataclass(frozen=True)
class HeadingEntry:
    """One heading found by an indexing pass; not persisted, not stable across edits."""
    level: int      # 1-6
    text:  str      # display text with inline markers stripped
    id:    str      # heading-<slug>-<ordinal>
    line:  int      # zero-based source line
