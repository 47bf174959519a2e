"""Shared pytest fixtures for SmokeTimer tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from smoketimer.database.db import configure_engine, init_db
from smoketimer.timer.engine import TimerEngine

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(qapp, clock):
    """Fresh TimerEngine with the default 1h15m countdown."""
    eng = TimerEngine(parent=None, clock=clock)
    yield eng
    eng.shutdown()


@pytest.fixture
def short_engine(qapp, clock):
    """TimerEngine with a 5 second countdown."""
    eng = TimerEngine(parent=None, duration_ms=5000, clock=clock)
    yield eng
    eng.shutdown()
