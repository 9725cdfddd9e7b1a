"""
Health checks - for load balancers, Kubernetes, and monitoring.
"""

from fastapi import APIRouter
from sqlalchemy import text

from product_api.config import get_settings
from product_api.db.session import DbSession

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(session: DbSession):
    """Readiness: can the database answer a trivial query?"""
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}
