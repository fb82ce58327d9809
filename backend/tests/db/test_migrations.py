"""Migrations - upgrade builds the schema the models describe, downgrade removes it.

Design Decisions:
    - Runs alembic against a file-backed SQLite database (batch mode on sqlite)
    - Sync tests: env.py starts its own event loop with asyncio.run
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from octopus.db.base import Base

BACKEND = Path(__file__).resolve().parents[2]


@pytest.fixture
def alembic_db(tmp_path, monkeypatch):
    path = tmp_path / "migrations.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{path}")
    cfg = Config()
    cfg.set_main_option("script_location", str(BACKEND / "alembic"))
    engine = create_engine(f"sqlite:///{path}")
    yield cfg, engine
    engine.dispose()


def test_upgrade_matches_model_metadata(alembic_db):
    cfg, engine = alembic_db

    command.upgrade(cfg, "head")

    inspector = inspect(engine)
    assert set(inspector.get_table_names()) == set(Base.metadata.tables) | {"alembic_version"}
    for name, table in Base.metadata.tables.items():
        columns = {c["name"] for c in inspector.get_columns(name)}
        assert columns == {c.name for c in table.columns}, name


def test_metric_and_flag_uniqueness_exist_at_head(alembic_db):
    cfg, engine = alembic_db

    command.upgrade(cfg, "head")

    inspector = inspect(engine)
    metric_uniques = {u["name"] for u in inspector.get_unique_constraints("user_metrics")}
    flag_uniques = {u["name"] for u in inspector.get_unique_constraints("flagged_stories")}
    assert "no_duplicate_metric" in metric_uniques
    assert "no_duplicate_flag" in flag_uniques
    indexes = {i["name"] for i in inspector.get_indexes("reactions")}
    assert "ix_reactions_target" in indexes


def test_live_reaction_index_is_unique_at_head(alembic_db):
    cfg, engine = alembic_db

    command.upgrade(cfg, "head")

    indexes = {i["name"]: i for i in inspect(engine).get_indexes("reactions")}
    assert indexes["uq_reactions_live"]["unique"]
    assert indexes["uq_reactions_live"]["column_names"] == [
        "reactionable_type", "reactionable_id", "reaction_type", "creator",
    ]


def test_downgrade_steps_back_to_empty(alembic_db):
    cfg, engine = alembic_db
    command.upgrade(cfg, "head")

    command.downgrade(cfg, "003_metrics_unique")
    indexes = {i["name"] for i in inspect(engine).get_indexes("reactions")}
    assert "uq_reactions_live" not in indexes

    command.downgrade(cfg, "002_invites_left")
    inspector = inspect(engine)
    metric_uniques = {u["name"] for u in inspector.get_unique_constraints("user_metrics")}
    assert "no_duplicate_metric" not in metric_uniques

    command.downgrade(cfg, "001_initial")
    columns = {c["name"] for c in inspect(engine).get_columns("users")}
    assert "invites_left" not in columns

    command.downgrade(cfg, "base")
    assert inspect(engine).get_table_names() == ["alembic_version"]
