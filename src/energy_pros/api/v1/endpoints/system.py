# src/energy_pros/api/v1/endpoints/system.py
"""System health endpoints."""

import logging

from fastapi import APIRouter, Response, status
from sqlalchemy.exc import SQLAlchemyError

from energy_pros.core.settings import settings
from energy_pros.repositories import StorageDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
async def storage_health(storage: StorageDep, response: Response) -> dict[str, object]:
    """Report whether the configured store answers a trivial read."""
    try:
        post_count = sum(storage.hashtag_post_counts().values())
    except SQLAlchemyError:
        logger.exception("Storage health check failed")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable", "storage": settings.storage_backend}
    return {
        "status": "ok",
        "storage": settings.storage_backend,
        "version": settings.app_version,
        "posts": post_count,
    }
