from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine

import app.models  # noqa: F401
from app.core.config import get_settings
from app.db.base import Base

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"id", "email", "role", "admin_type", "department_id", "degree_program_id"},
    "modules": {"id", "code", "degree_program_id", "leader_id"},
    "medical_requests": {
        "id",
        "student_id",
        "status",
        "start_date",
        "end_date",
        "officer_comments",
        "admin_comments",
        "forwarded_to_id",
        "updated_at",
    },
    "notices": {"id", "module_id", "module_code", "created_at"},
    "enrollments": {"id", "student_id", "module_id", "status"},
    "notification_states": {"id", "user_id", "dismissed_ids", "read_ids", "version"},
}


def find_schema_gaps(connection: Connection) -> tuple[list[str], dict[str, list[str]]]:
    """Return ``(missing_tables, missing_columns)`` measured against ``REQUIRED_COLUMNS``."""
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
    missing_columns: dict[str, list[str]] = {}
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        gap = sorted(required - existing)
        if gap:
            missing_columns[table_name] = gap
    return missing_tables, missing_columns


def _assert_required_columns(bind: Engine) -> None:
    with bind.begin() as connection:
        missing_tables, missing_columns = find_schema_gaps(connection)
    if missing_tables:
        raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
    if missing_columns:
        flat = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
        raise RuntimeError(f"Missing required columns: {', '.join(flat)}")


def ensure_runtime_schema(bind: Engine | None = None, *, create: bool | None = None) -> bool:
    """Create missing tables (when enabled) and verify the columns the workflow depends on.

    Alembic owns the schema in deployed environments, so this is a no-op unless
    ``auto_create_schema`` is set or ``create`` is passed explicitly. Returns
    whether the bootstrap ran.
    """
    should_create = get_settings().auto_create_schema if create is None else create
    if not should_create:
        return False

    if bind is None:
        from app.db.session import engine as bind

    try:
        Base.metadata.create_all(bind=bind)
        _assert_required_columns(bind)
    except Exception as exc:
        logger.exception("Runtime schema bootstrap failed")
        raise RuntimeError("Runtime schema bootstrap failed") from exc
    logger.info("Runtime schema verified (%d tables)", len(REQUIRED_COLUMNS))
    return True
