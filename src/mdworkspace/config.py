"""Application configuration: settings schema and workspace.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "workspace.yaml"


class Settings(BaseModel):
    app_name:        str = "mdworkspace"
    db_url:          str = "sqlite:///mdworkspace.db"
    documents_key:   str = Field(default="markdown-editor-files", description="Storage key for the document list")
    active_key:      str = Field(default="markdown-editor-active", description="Storage key for the active document id")
    preferences_key: str = Field(default="md-editor-settings",    description="Storage key for editor preferences")
    default_title:   str = Field(default="Untitled", min_length=1, description="Title for documents created without one")
    placeholder:     str = Field(default="Start writing here...", description="Body seeded into new documents")
    line_height:     float = Field(default=1.75 * 13.6, gt=0, description="Estimated raw-view line height in px")
    scroll_margin:   float = Field(default=100.0, ge=0, description="Space left above a heading when jumping in the raw view")
    parser_config:   str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    export_dir:      str = Field(default="exports", description="Directory for exported .md files")
    log_level:       str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from workspace.yaml, then MDWS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDWS_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
