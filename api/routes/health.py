"""Health check endpoint."""

from fastapi import APIRouter

from docscript import __version__
from docscript.runtime.interpreters import default_interpreter_pool

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "service": "docscript-api"
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness check endpoint."""
    return {
        "ready": True,
        "languages": default_interpreter_pool().languages,
    }
