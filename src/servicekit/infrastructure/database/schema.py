"""SQLAlchemy Core table definitions for the job queue database."""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

jobs = Table(
    "jobs",
    metadata,
    Column("id", Text, primary_key=True),
    Column("class_name", Text, nullable=False),
    Column("args", Text, nullable=False),  # JSON object
    Column("queue", Text, nullable=False, default="default", server_default="default"),
    Column("status", Text, nullable=False),  # pending | running | completed | failed | dead_letter
    Column("attempts", Integer, default=0, server_default="0"),
    Column("error", Text),
    Column("scheduled_at", Text),  # ISO 8601 UTC, NULL = due immediately
    Column("enqueued_at", Text, nullable=False),
    Column("completed_at", Text),
)

Index("ix_jobs_status_scheduled", jobs.c.status, jobs.c.scheduled_at)
Index("ix_jobs_queue", jobs.c.queue)
