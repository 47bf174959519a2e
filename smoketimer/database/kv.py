"""Key/value access on top of the ``key_values`` table."""

from __future__ import annotations

from sqlalchemy.orm import Session as OrmSession

from .db import get_session
from .models import KeyValue


def get_value(key: str, default: str | None = None) -> str | None:
    with get_session() as db:
        row = db.get(KeyValue, key)
        return row.value if row is not None else default


def put_value(db: OrmSession, key: str, value) -> None:
    """Upsert inside an open session.  Values are stored as text."""
    db.merge(KeyValue(key=key, value=str(value)))


def set_value(key: str, value) -> None:
    with get_session() as db:
        put_value(db, key, value)
