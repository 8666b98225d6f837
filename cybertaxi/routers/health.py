# cybertaxi/routers/health.py
"""
Liveness / readiness endpoints.
/health         : database, players table, JWT configuration
/db-status      : database connectivity only
/system-health  : everything above plus vehicle count and connection pool status
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from cybertaxi.database import get_db
from cybertaxi.config import settings
from cybertaxi.utils.logger import get_logger
from datetime import datetime

router = APIRouter()
logger = get_logger(__name__)


class HealthCheckFailed(Exception):
    pass


def _check_database(db: Session, details: dict):
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        raise HealthCheckFailed(f"Database connection failed: {e}")
    details["db"] = "Connected"


def _check_players_table(db: Session, details: dict):
    try:
        db.execute(text("SELECT 1 FROM players LIMIT 1"))
    except Exception as e:
        raise HealthCheckFailed(f"Players table access failed: {e}")
    details["players_table"] = "Accessible"


def _check_jwt(details: dict):
    if not settings.JWT_SECRET:
        raise HealthCheckFailed("JWT configuration error: JWT_SECRET not set")
    details["jwt"] = "Configured"


def _failed(message: str, e: HealthCheckFailed) -> JSONResponse:
    logger.error(f"{message}: {e}")
    return JSONResponse(
        status_code=500,
        content={"status": "Error", "message": message, "details": str(e)},
    )


@router.get("/health", summary="Basic system health")
def health_check(db: Session = Depends(get_db)):
    details = {}
    try:
        _check_database(db, details)
        _check_players_table(db, details)
        _check_jwt(details)
    except HealthCheckFailed as e:
        return _failed("System health check failed", e)
    return {"status": "OK", "timestamp": datetime.utcnow().isoformat(), "details": details}


@router.get("/db-status", summary="Database connectivity")
def db_status(db: Session = Depends(get_db)):
    details = {}
    try:
        _check_database(db, details)
    except HealthCheckFailed as e:
        return _failed("Database check failed", e)
    return {"status": "OK", "details": details}


@router.get("/system-health", summary="Full system health")
def system_health(db: Session = Depends(get_db)):
    details = {"web_server": "Running"}
    try:
        _check_database(db, details)
        _check_players_table(db, details)
        try:
            details["vehicle_count"] = db.execute(text("SELECT COUNT(*) FROM vehicles")).scalar()
        except Exception as e:
            raise HealthCheckFailed(f"Vehicle count query failed: {e}")
        _check_jwt(details)
    except HealthCheckFailed as e:
        return _failed("System health check failed", e)

    details["pool"] = db.get_bind().pool.status()
    return {"status": "OK", "timestamp": datetime.utcnow().isoformat(), "details": details}
