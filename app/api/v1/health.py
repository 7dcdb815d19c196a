"""Health check endpoint with database and cache connectivity checks."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.cache import Cache, get_cache
from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
) -> HealthResponse:
    """
    Return service health status, database and cache connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    if not cache.enabled:
        cache_status = "disabled"
    else:
        cache_status = "connected" if cache.ping() else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        cache=cache_status,
    )
