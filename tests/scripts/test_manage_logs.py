"""
Tests for the log store housekeeping script.
"""

import importlib.util
from pathlib import Path

import pytest

from rageshake.core import config
from rageshake.features.store import SQLAlchemyLogStore

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "manage_logs.py"


@pytest.fixture
def manage_logs():
    spec = importlib.util.spec_from_file_location("manage_logs", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def configured(monkeypatch, database_url):
    monkeypatch.setattr(config, "settings", config.Settings(database_url=database_url))
    return database_url


async def test_list_missing_database_creates_nothing(manage_logs, configured, tmp_path, capsys):
    """Test listing without a database reports it and leaves no file behind."""
    with pytest.raises(SystemExit):
        await manage_logs.list_sessions()

    assert "No log database" in capsys.readouterr().out
    assert not (tmp_path / "logs.db").exists()


async def test_list_existing_sessions(manage_logs, configured, capsys):
    """Test listing an existing database adds no session of its own."""
    seed = SQLAlchemyLogStore("instance-0000000000100-seed", configured)
    await seed.open()
    await seed.close()

    await manage_logs.list_sessions()

    reopened = SQLAlchemyLogStore("instance-0000000000200-check", configured)
    await reopened.open()
    try:
        assert await reopened.list_session_ids() == ["instance-0000000000100-seed"]
    finally:
        await reopened.close()
    assert "1 sessions" in capsys.readouterr().out
