"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .api.routes import analyze, generate, recommend, order

# Get settings
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Difficulty scoring and solvable sink generation for Fruit Match levels",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(analyze.router)
app.include_router(generate.router)
app.include_router(recommend.router)
app.include_router(order.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Fruit Match Level Designer API",
        "endpoints": {
            "analyze": "/api/analyze",
            "batch_analyze": "/api/levels/batch-analyze",
            "solvability": "/api/solvability",
            "estimate": "/api/estimate",
            "generate": "/api/generate",
            "recommend": "/api/recommend/{tier}",
            "order": "/api/analyze/order",
            "optimize_order": "/api/optimize-order",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import os
    import uvicorn

    # Reload mode (debug) doesn't support workers
    worker_count = 1 if settings.debug else min(4, os.cpu_count() or 4)

    uvicorn.run(
        "fruitmatch.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=worker_count,
    )
