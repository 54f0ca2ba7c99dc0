"""
Service-level HTTP routes: liveness and database health.
"""


from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from app.utils.logger import setup_logger

logger = setup_logger("api")

router = APIRouter(prefix="/api")


@router.get("/health")
async def health(request: Request):
    """Report whether the API is up and the database answers."""
    try:
        await request.app.state.store.check_connection()
    except RuntimeError:
        logger.error("Health check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "degraded", "database": "unavailable"},
        )
    return {"status": "ok", "database": "ok"}
