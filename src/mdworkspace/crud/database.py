from __future__ import annotations
from sqlmodel import SQLModel, create_engine

# registers kv_entries on SQLModel.metadata
from mdworkspace.crud import sql_models  # noqa: F401


def make_engine(db_url: str):
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False, connect_args={"check_same_thread": False})
    return create_engine(db_url, echo=False)


def init_db(engine) -> None:
    SQLModel.metadata.create_all(engine)
