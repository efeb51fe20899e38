"""Liveness endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Report that the app is up and how many bots it serves."""
    registry = getattr(request.app.state, "registry", None)
    return {
        "status": "healthy",
        "bots": len(registry) if registry is not None else 0,
    }
