"""Shared test fixtures for TypeTrainer tests."""

import tempfile
from pathlib import Path

import pytest

from core.scheduler import ManualScheduler
from core.session_config import SessionConfig
from core.session_engine import TypingSession


@pytest.fixture
def temp_db_path():
    """Create a temporary database path and clean up afterwards."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def scheduler():
    """Virtual-clock scheduler starting at t=0."""
    return ManualScheduler()


@pytest.fixture
def make_session(scheduler):
    """Factory for sessions driven by the manual scheduler.

    Completion is delivered inline unless a config says otherwise.
    """
    def factory(reference_text: str, config: SessionConfig = None, **kwargs):
        if config is None:
            config = SessionConfig(completion_delay_ms=0)
        return TypingSession(reference_text, config=config, scheduler=scheduler, **kwargs)
    return factory
