from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.database import get_optional_db

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the catalog database is reachable."
)
def readiness_check(db: Optional[Session] = Depends(get_optional_db)):
    """
    Readiness check for the database.

    Reports "not_ready" with the reason when the database is not
    configured or does not answer.
    """
    checks = {"database": False}

    if db is None:
        checks["database_error"] = "Database not connected"
    else:
        try:
            db.execute(text("SELECT 1"))
            checks["database"] = True
        except Exception as e:
            checks["database_error"] = str(e)

    return {
        "status": "ready" if checks["database"] else "not_ready",
        "checks": checks
    }
