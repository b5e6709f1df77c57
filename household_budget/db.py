from __future__ import annotations

import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

logger = logging.getLogger("db")


def make_engine(url: str) -> Engine:
    # SQLite needs a special connect arg; others (e.g., Postgres) don't.
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    engine = create_engine(
        url,
        echo=False,  # set True to see SQL in console
        connect_args=connect_args,
    )
    # Log which DB URL is actually in use (helps avoid "which .db?" confusion).
    logger.info("Store URL in use: %s", engine.url)
    return engine


def create_db_and_tables(engine: Engine) -> None:
    """Create all tables registered on SQLModel.metadata (idempotent)."""
    import household_budget.models  # noqa: F401  # registers tables

    SQLModel.metadata.create_all(engine)
