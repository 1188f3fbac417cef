# /namer/main.py

# --- Core FastAPI Imports ---
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# --- Application-specific Imports ---
from .core import config
from .core.logging_config import setup_logging
from .db import base as db_base
from .db.database import engine
from .routers import (
    generation_router,
    domain_router,
    project_router,
    logo_router,
    share_router,
    export_router,
    public_router,
    maintenance_router,
    mood_board_router,
)

logger = logging.getLogger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Every model is registered on Base by importing namer.db.base.
    db_base.Base.metadata.create_all(bind=engine)
    logger.info("Namer backend started.")
    yield
    logger.info("Namer backend shutting down.")


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Namer Backend API",
    description="AI business-name generation, domain checks, logos, shares and exports.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Router Inclusion ---
app.include_router(generation_router.router, prefix="/api/generations", tags=["Generations"])
app.include_router(domain_router.router, prefix="/api/domains", tags=["Domains"])
app.include_router(project_router.router, prefix="/api/projects", tags=["Projects"])
app.include_router(mood_board_router.router, prefix="/api/mood-boards", tags=["Mood Boards"])
app.include_router(logo_router.router, prefix="/api/logos", tags=["Logos"])
app.include_router(share_router.router, prefix="/api/shares", tags=["Shares"])
app.include_router(export_router.router, prefix="/api/exports", tags=["Exports"])
app.include_router(maintenance_router.router, prefix="/api/maintenance", tags=["Maintenance"])

# Unauthenticated, public-facing routes
app.include_router(public_router.router, prefix="/public", tags=["Public"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Namer Backend is running!", "version": app.version}
