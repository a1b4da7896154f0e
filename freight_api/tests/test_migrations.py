from alembic import command
from sqlalchemy import create_engine, inspect

from src.db.base import Base
from src.db.run_migrations import build_config


def _schema(url):
    engine = create_engine(url)
    try:
        insp = inspect(engine)
        schema = {}
        for table in insp.get_table_names():
            if table == "alembic_version":
                continue
            schema[table] = {
                "columns": {
                    c["name"]: (str(c["type"]), c["nullable"]) for c in insp.get_columns(table)
                },
                "indexes": {i["name"]: tuple(i["column_names"]) for i in insp.get_indexes(table)},
                "checks": sorted(c["name"] for c in insp.get_check_constraints(table)),
            }
        return schema
    finally:
        engine.dispose()


def _upgrade(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    cfg = build_config()
    command.upgrade(cfg, "head")
    return url, cfg


def test_upgrade_matches_models(tmp_path, monkeypatch):
    migrated_url, _ = _upgrade(tmp_path, monkeypatch)

    reference_url = f"sqlite:///{tmp_path / 'reference.db'}"
    engine = create_engine(reference_url)
    Base.metadata.create_all(engine)
    engine.dispose()

    migrated = _schema(migrated_url)
    assert set(migrated) == {"loads", "receipts"}
    assert migrated == _schema(reference_url)
    assert migrated["loads"]["checks"] == ["ck_loads_length_unit", "ck_loads_weight_unit"]


def test_downgrade_removes_tables(tmp_path, monkeypatch):
    url, cfg = _upgrade(tmp_path, monkeypatch)
    command.downgrade(cfg, "base")
    assert _schema(url) == {}
