from __future__ import annotations
from datetime import datetime

from sqlmodel import Session

from mdworkspace.crud.sql_models import KeyValueRow
from mdworkspace.crud.storage import Storage


class SQLStorage(Storage):
    """Key-value storage backed by the kv_entries table; one short session per call."""

    def __init__(self, engine):
        self.engine = engine

    def load(self, key: str) -> str | None:
        with Session(self.engine) as session:
            row = session.get(KeyValueRow, key)
            return row.value if row else None

    def save(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            row = session.get(KeyValueRow, key)
            if row is None:
                row = KeyValueRow(key=key, value=value)
            else:
                row.value = value
                row.updated_at = datetime.now()
            session.add(row)
            session.commit()
