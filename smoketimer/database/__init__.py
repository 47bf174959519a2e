"""Database package."""

from .db import get_session, init_db
from .kv import get_value, put_value, set_value
from .models import KeyValue, CounterEntry

__all__ = [
    "get_session",
    "init_db",
    "get_value",
    "set_value",
    "put_value",
    "KeyValue",
    "CounterEntry",
]
