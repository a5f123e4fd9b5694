"""
Migration round trip against PostgreSQL.

Run with RUN_DB_TESTS=1 and TEST_POSTGRES_URL=postgresql+asyncpg://... pointing
at a disposable database.
"""

import os
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config

from app.core.config import settings
from app.routers.health import migration_head

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@pytest.mark.db
def test_upgrade_and_downgrade(monkeypatch):
    url = os.environ.get("TEST_POSTGRES_URL")
    if not url:
        pytest.skip("TEST_POSTGRES_URL is not set")
    monkeypatch.setattr(settings, "DATABASE_URL", url)

    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))

    command.upgrade(config, "head")
    command.downgrade(config, "base")
    command.upgrade(config, "head")


@pytest.mark.unit
def test_single_migration_head():
    assert migration_head() == "a3c1e5f7b9d2"
