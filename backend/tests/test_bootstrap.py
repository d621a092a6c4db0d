import pytest
from sqlalchemy import create_engine, inspect

from app.db import bootstrap


def test_runtime_schema_is_left_alone_when_disabled(monkeypatch):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: pytest.fail("create_all called"))
    assert bootstrap.ensure_runtime_schema(create=False) is False


def test_runtime_schema_creates_workflow_tables():
    engine = create_engine("sqlite+pysqlite://")
    try:
        assert bootstrap.ensure_runtime_schema(engine, create=True) is True
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert set(bootstrap.REQUIRED_COLUMNS) <= tables


def test_runtime_schema_bootstrap_raises_on_validation_failure(monkeypatch):
    monkeypatch.setitem(bootstrap.REQUIRED_COLUMNS, "medical_requests", {"id", "legacy_reviewer"})
    engine = create_engine("sqlite+pysqlite://")
    try:
        with pytest.raises(RuntimeError, match="Runtime schema bootstrap failed") as excinfo:
            bootstrap.ensure_runtime_schema(engine, create=True)
    finally:
        engine.dispose()
    assert "medical_requests.legacy_reviewer" in str(excinfo.value.__cause__)
