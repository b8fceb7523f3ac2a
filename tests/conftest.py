"""Shared pytest fixtures for Habito tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from habito.database.db import configure_engine, init_db
from habito.storage import MemoryStore
from habito.timer.interval import IntervalConfig, IntervalTimerEngine
from habito.timer.stopwatch import StopwatchEngine

from helpers import CallRecorder, FakeClock


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
def store():
    return MemoryStore()


@pytest.fixture
def segments():
    """Stand-in segment logger recording (minutes, start, end) calls."""
    return CallRecorder()


@pytest.fixture
def stopwatch(qapp, store, clock, segments):
    engine = StopwatchEngine(
        store, "manual-timer", clock=clock, on_work_segment_complete=segments,
    )
    yield engine
    engine.close()


@pytest.fixture
def pomodoro(qapp, store, clock, segments):
    """25/5 min Pomodoro, long break 15 min every 4th cycle."""
    engine = IntervalTimerEngine(
        store, "pomodoro-timer", IntervalConfig(25, 5, 15, 4),
        clock=clock, on_work_segment_complete=segments,
    )
    yield engine
    engine.close()


@pytest.fixture
def short_cycle(qapp, store, clock, segments):
    """1 min work, 1 min break, 2 min long break every 2nd cycle."""
    engine = IntervalTimerEngine(
        store, "short-timer", IntervalConfig(1, 1, 2, 2),
        clock=clock, on_work_segment_complete=segments,
    )
    yield engine
    engine.close()
