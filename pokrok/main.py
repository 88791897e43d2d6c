"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokrok.config import settings
from pokrok.database import database
from pokrok.routers import areas, auth, goals, habits, jobs, statistics, steps, workflows


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    await database.connect()
    yield
    await database.disconnect()


app = FastAPI(
    title="Pokrok API",
    description="Backend API for personal progress: habits, daily steps, areas and goals",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(habits.router)
app.include_router(steps.router)
app.include_router(areas.router)
app.include_router(goals.router)
app.include_router(workflows.router)
app.include_router(statistics.router)
app.include_router(jobs.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Pokrok API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


def run() -> None:
    """Console entry point."""
    uvicorn.run(
        "pokrok.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
