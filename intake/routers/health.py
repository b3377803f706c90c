# intake/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + entity store.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from intake.database import get_db
from intake.config import settings
from intake.dependencies import get_store
from intake.services.entity_store import EntityStore
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
async def health_check(db: Session = Depends(get_db), store: EntityStore = Depends(get_store)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Entity store backend and whether it answers a client listing
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "store": {"backend": settings.STORE_BACKEND, "status": "unknown"},
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    try:
        clients = await store.list_clients()
        result["store"]["status"] = "ok"
        result["store"]["clients"] = len(clients)
    except Exception as e:
        result["store"]["status"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
