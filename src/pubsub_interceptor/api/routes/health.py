"""Health check endpoint."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness check; the interceptor has no backing services."""
    return {"status": "ok"}
