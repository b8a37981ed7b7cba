"""Tests for the process-wide queue setting and queue construction."""

from __future__ import annotations

from pathlib import Path

from servicekit.config.settings import ServicekitSettings
from servicekit.jobs.database import DatabaseQueue
from servicekit.jobs.queue import (
    InlineQueue,
    JobQueue,
    RecordingQueue,
    build_queue,
    configure_queue,
    get_queue,
)


class TestConfigureQueue:
    def test_default_is_inline(self) -> None:
        assert isinstance(get_queue(), InlineQueue)

    def test_returns_previous(self) -> None:
        recording = RecordingQueue()
        previous = configure_queue(recording)
        assert isinstance(previous, InlineQueue)
        assert get_queue() is recording

    def test_queues_satisfy_protocol(self) -> None:
        assert isinstance(InlineQueue(), JobQueue)
        assert isinstance(RecordingQueue(), JobQueue)


class TestBuildQueue:
    def test_inline(self, tmp_path: Path) -> None:
        settings = ServicekitSettings.from_cli(project_root=tmp_path)
        assert isinstance(build_queue(settings), InlineQueue)

    def test_test_adapter(self, tmp_path: Path) -> None:
        (tmp_path / "servicekit.toml").write_text('[queue]\nadapter = "test"\ndefault_queue = "low"\n')
        queue = build_queue(ServicekitSettings.from_cli(project_root=tmp_path))
        assert isinstance(queue, RecordingQueue)
        assert queue.default_queue == "low"

    def test_database_adapter(self, tmp_path: Path) -> None:
        (tmp_path / "servicekit.toml").write_text(
            '[queue]\nadapter = "database"\nsync = true\n[plugins]\nenabled = false\n'
        )
        queue = build_queue(ServicekitSettings.from_cli(project_root=tmp_path))
        assert isinstance(queue, DatabaseQueue)
        queue.shutdown()
        assert (tmp_path / ".servicekit" / "jobs.db").is_file()
