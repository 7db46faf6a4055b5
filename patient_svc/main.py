"""
FastAPI application entry point for the Patient Records Service.

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware Stack (order matters!)                          │
    │    ├── LoggingMiddleware  - Request logging & metrics       │
    │    └── CORSMiddleware     - Cross-origin support            │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py     - /health, /ready, /metrics endpoints  │
    │    └── patients.py   - Patient CRUD with soft delete        │
    ├─────────────────────────────────────────────────────────────┤
    │  PatientService (services/)       ← Injected via Depends()  │
    ├─────────────────────────────────────────────────────────────┤
    │  PatientRepository (repositories/) ← Injected into service  │
    ├─────────────────────────────────────────────────────────────┤
    │  Database (SQLite)                ← Injected into repository│
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from core.config import API_HOST, API_PORT, API_RELOAD, CORS_ORIGINS
from core.dependencies import get_database
from core.exceptions import setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import health_router, patients_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging first, then create the database and schema.
    Shutdown: log only; connections are opened per operation.
    """
    setup_logging(level="INFO", json_format=True)

    logger = logging.getLogger(__name__)
    logger.info("Starting Patient Records Service...")

    db = get_database()
    logger.info(
        "Database initialized",
        extra={"db_path": db.db_path}
    )

    yield

    logger.info("Patient Records Service shutting down...")


def create_app() -> FastAPI:
    """Build the application with handlers, middleware and routers registered."""
    app = FastAPI(
        title="Patient Records Service",
        description="REST API for patient records: create, read, list, update and soft-delete.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    setup_exception_handlers(app)

    # Middleware runs in reverse order of registration: logging wraps CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router)
    app.include_router(patients_router)
    return app


app = create_app()


def run() -> None:
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )


if __name__ == "__main__":
    run()
