"""
Health check endpoints for monitoring system status.
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config import API_VERSION
from app.db import get_session

router = APIRouter(prefix="/health", tags=["health"])


def check_database_health() -> Dict[str, str]:
    """
    Check database connectivity and health.

    Returns:
        Dict with status and optional error details
    """
    try:
        with get_session() as db:
            result = db.execute(text("SELECT 1")).scalar()
            if result == 1:
                return {"status": "ok"}
            return {"status": "down", "error": "Unexpected query result"}
    except SQLAlchemyError as e:
        return {"status": "down", "error": f"Database error: {e.__class__.__name__}"}


@router.get("/")
def health_check() -> Dict[str, Any]:
    """
    Overall service health.

    Returns:
        Dict containing:
        - status: "ok" | "down"
        - db: database health status
        - version: API version
        - timestamp: current UTC timestamp
    """
    db_health = check_database_health()
    return {
        "status": "ok" if db_health["status"] == "ok" else "down",
        "db": db_health,
        "version": API_VERSION,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/db")
def database_health() -> Dict[str, Any]:
    """
    Database-specific health check with table sizes.

    Returns:
        Dict with detailed database health information
    """
    health_status = check_database_health()
    if health_status["status"] != "ok":
        return health_status

    try:
        with get_session() as db:
            health_status["tables"] = {
                table: db.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar()
                for table in ("users", "posts", "comments", "likes", "follows")
            }
    except SQLAlchemyError as e:
        health_status["error"] = f"Extended check failed: {e.__class__.__name__}"

    health_status["timestamp"] = datetime.utcnow().isoformat()
    return health_status
