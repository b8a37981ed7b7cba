"""Shared pytest fixtures for servicekit tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from servicekit.infrastructure.database.engine import init_database
from servicekit.jobs.queue import InlineQueue, RecordingQueue, configure_queue


@pytest.fixture(autouse=True)
def _inline_queue() -> Iterator[None]:
    """Every test starts with the default inline queue, restored afterwards."""
    previous = configure_queue(InlineQueue())
    try:
        yield
    finally:
        configure_queue(previous)


@pytest.fixture(autouse=True)
def _restore_root_handlers() -> Iterator[None]:
    """CLI invocations reconfigure logging; put the root handlers back."""
    root = logging.getLogger()
    package = logging.getLogger("servicekit")
    handlers, level, package_level = root.handlers[:], root.level, package.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    package.setLevel(package_level)


@pytest.fixture
def recording_queue() -> RecordingQueue:
    """Install a RecordingQueue as the process-wide queue."""
    queue = RecordingQueue()
    configure_queue(queue)
    return queue


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with the jobs table created."""
    engine = init_database(tmp_path / "jobs.db")
    try:
        yield engine
    finally:
        engine.dispose()
