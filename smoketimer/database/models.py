"""SQLAlchemy ORM models for SmokeTimer."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class KeyValue(Base):
    """Flat preference-style store: counters and last-reset stamps."""

    __tablename__ = "key_values"

    key = Column(String(64), primary_key=True)
    value = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<KeyValue {self.key}={self.value}>"


class CounterEntry(Base):
    """One press of a counter button.  Row order is chronological."""

    __tablename__ = "counter_entries"
    __table_args__ = (Index("ix_counter_entries_counter", "counter"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    counter = Column(String(20), nullable=False)  # cigarette | weed
    timestamp = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return f"<CounterEntry id={self.id} counter={self.counter} at={self.timestamp}>"
