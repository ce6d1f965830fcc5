from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session

from storeledger.app.db.session import SessionLocal


def get_db() -> Iterator[Session]:
    """One session per request; operations commit or roll back themselves."""
    with SessionLocal() as db:
        yield db
