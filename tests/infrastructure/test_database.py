"""Tests for the job database engine and schema."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import inspect, text

from servicekit.infrastructure.database.engine import init_database


class TestInitDatabase:
    def test_creates_parents_and_tables(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path / "nested" / "jobs.db")
        try:
            assert "jobs" in inspect(engine).get_table_names()
        finally:
            engine.dispose()
        assert (tmp_path / "nested" / "jobs.db").is_file()

    def test_wal_mode(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path / "jobs.db")
        try:
            with engine.connect() as conn:
                assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        finally:
            engine.dispose()

    def test_idempotent(self, tmp_path: Path) -> None:
        init_database(tmp_path / "jobs.db").dispose()
        engine = init_database(tmp_path / "jobs.db")
        engine.dispose()
