from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parents[1]


def _alembic_config(connection) -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))
    config.attributes["connection"] = connection
    config.attributes["configure_logger"] = False
    return config


def test_upgrade_and_downgrade(tmp_path):
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path}/migrations.db", future=True)

    with engine.begin() as connection:
        command.upgrade(_alembic_config(connection), "head")
    inspector = inspect(engine)
    assert {"logins", "login_events", "admin_sessions"} <= set(inspector.get_table_names())
    unique_names = {c["name"] for c in inspector.get_unique_constraints("login_events")}
    assert "uq_login_events_day_location" in unique_names

    with engine.begin() as connection:
        command.downgrade(_alembic_config(connection), "base")
    assert set(inspect(engine).get_table_names()) <= {"alembic_version"}

    engine.dispose()
