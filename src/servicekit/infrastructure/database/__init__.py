"""SQLite persistence via SQLAlchemy Core."""

from servicekit.infrastructure.database.engine import create_db_engine, init_database
from servicekit.infrastructure.database.schema import jobs, metadata

__all__ = ["create_db_engine", "init_database", "jobs", "metadata"]
