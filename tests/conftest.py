"""
Pytest configuration for rageshake tests.
Points the global settings at a throwaway database before anything imports them.
"""

import os
import tempfile

_test_data_dir = tempfile.mkdtemp(prefix="rageshake_test_")
os.environ.setdefault(
    "RAGESHAKE_DATABASE_URL", f"sqlite+aiosqlite:///{_test_data_dir}/global.db"
)
os.environ.setdefault("RAGESHAKE_BUG_REPORT_ENDPOINT", "")

import pytest
import pytest_asyncio

from rageshake.core.config import Settings
from rageshake.features.store import SQLAlchemyLogStore


@pytest.fixture
def database_url(tmp_path):
    """URL of a fresh SQLite database file."""
    return f"sqlite+aiosqlite:///{tmp_path}/logs.db"


@pytest.fixture
def settings(database_url):
    """Settings with a small budget and no report endpoint."""
    return Settings(
        database_url=database_url,
        flush_interval_seconds=30,
        max_log_size_bytes=1024 * 1024,
        bug_report_endpoint=None,
        app_version="1.2.3",
    )


@pytest_asyncio.fixture
async def store(database_url):
    """Opened log store for session ``instance-0000000000300-current``."""
    log_store = SQLAlchemyLogStore("instance-0000000000300-current", database_url)
    await log_store.open()
    yield log_store
    await log_store.close()
