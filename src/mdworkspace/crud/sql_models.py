from __future__ import annotations
from datetime import datetime

from sqlalchemy import Column
from sqlalchemy.types import DateTime, Text
from sqlmodel import Field, SQLModel


class KeyValueRow(SQLModel, table=True):
    __tablename__ = "kv_entries"

    key: str = Field(primary_key=True)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime, nullable=False))
