"""
docscript API - FastAPI Application

Run with: uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docscript import __version__
from docscript.config import load_config
from api.routes.classify import router as classify_router
from api.routes.run import router as run_router
from api.routes.health import router as health_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    config = load_config()
    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.WARNING))
    logger.info("docscript API starting...")
    yield
    logger.info("docscript API shutting down...")


app = FastAPI(
    title="docscript API",
    description="API for docscript v1.1 - Scripting activation for SVG-like documents",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(classify_router, prefix="/api/v1", tags=["Classification"])
app.include_router(run_router, prefix="/api/v1", tags=["Scripting"])


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": "docscript API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
