"""Health check endpoints for monitoring and container orchestration."""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from sqlalchemy.engine import Engine
from sqlmodel import Session, text

from bruce import __version__
from bruce.deps import ContextDep

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthStatus(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    version: str = __version__
    checks: Dict[str, Any]


class ServiceCheck(BaseModel):
    """Individual service check result."""

    status: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None


def check_database(engine: Engine) -> ServiceCheck:
    start = time.time()
    try:
        with Session(engine) as session:
            session.exec(text("SELECT 1"))
        latency = (time.time() - start) * 1000
        return ServiceCheck(status="healthy", latency_ms=round(latency, 2))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return ServiceCheck(status="unhealthy", error=str(e))


@router.get("/health", response_model=HealthStatus, tags=["system"])
def health_check(context: ContextDep) -> HealthStatus:
    """
    Health of the application and its dependencies.

    The completion API is reported as configured or not; it is never called.
    """
    db_check = check_database(context.engine)
    return HealthStatus(
        status=db_check.status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        checks={
            "database": db_check.model_dump(),
            "spotify": {"configured": context.settings.spotify_configured},
            "completion": {"configured": context.relay.completion is not None},
        },
    )


@router.get("/health/live", tags=["system"])
def liveness_probe() -> Dict[str, str]:
    return {"status": "alive"}


@router.get("/health/ready", tags=["system"])
def readiness_probe(context: ContextDep) -> Dict[str, str]:
    """Returns 200 only if the database is reachable."""
    if check_database(context.engine).status == "unhealthy":
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ready"}
