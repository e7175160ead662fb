"""
Migration wiring tests.

No database is needed: the revision chain is read from disk and the
synchronous engine is only constructed, never connected.
"""

from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine

from src.config import settings

ROOT = Path(__file__).resolve().parents[1]


def _alembic_config() -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "migrations"))
    return config


def test_single_head_is_initial_schema():
    script = ScriptDirectory.from_config(_alembic_config())
    assert script.get_heads() == ["001"]
    assert script.get_revision("001").down_revision is None


def test_migrations_use_psycopg2_sync_url():
    engine = create_engine(settings.database_url_sync)
    try:
        assert engine.dialect.name == "postgresql"
        assert engine.dialect.driver == "psycopg2"
    finally:
        engine.dispose()
