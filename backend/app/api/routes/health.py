from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.db.bootstrap import find_schema_gaps

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/ready")
def health_ready(db: Session = Depends(get_db)) -> JSONResponse:
    database: dict = {"ok": True, "schema_ok": False, "missing_tables": [], "missing_columns": {}, "error": None}
    try:
        connection = db.connection()
        connection.execute(text("SELECT 1"))
        missing_tables, missing_columns = find_schema_gaps(connection)
        database.update(
            schema_ok=not missing_tables and not missing_columns,
            missing_tables=missing_tables,
            missing_columns=missing_columns,
        )
    except Exception as exc:  # pragma: no cover - environment dependent
        database.update(ok=False, error=str(exc))

    ready = database["ok"] and database["schema_ok"]
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ok" if ready else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": database,
        },
    )
