"""Tests that the Alembic migrations build the same schema as the models"""
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

BACKEND = Path(__file__).resolve().parent.parent


def _alembic_config(url: str) -> Config:
    config = Config()
    config.set_main_option("script_location", str(BACKEND / "alembic"))
    config.set_main_option("sqlalchemy.url", url)
    return config


def test_upgrade_and_downgrade(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = _alembic_config(url)

    command.upgrade(config, "head")

    engine = create_engine(url)
    inspector = inspect(engine)
    assert {"accounts", "refresh_tokens", "security_events"} <= set(inspector.get_table_names())

    ledger_columns = {column["name"] for column in inspector.get_columns("refresh_tokens")}
    assert {"record_id", "account_id", "token_hash", "expires_at", "user_agent", "ip_address"} <= ledger_columns

    event_columns = {column["name"] for column in inspector.get_columns("security_events")}
    assert "metadata" in event_columns

    command.downgrade(config, "base")
    assert "accounts" not in inspect(engine).get_table_names()
    engine.dispose()
