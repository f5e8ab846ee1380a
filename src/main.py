"""
Design Fulfillment Service - Main Application
=============================================

Read-side service for design-production orders.

Modules:
- Fulfillment: Order lifecycle interpretation, SLA deadlines, urgency,
  and the operator work queue

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities, lifecycle rules and SLA calculations
- Infrastructure: Database, SLA policy file
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from config import settings
from core import (
    ApplicationException, ConfigurationException,
    RepositoryException, ResourceNotFoundException
)

# Infrastructure
from infrastructure.database import init_database, close_database

# Fulfillment Module
from fulfillment.infrastructure import SLAConfigManager
from fulfillment.interfaces import fulfillment_router

# Shared
from shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler,
    not_found_handler,
    service_unavailable_handler,
)
from shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database engine
    3. Load SLA configuration and start watching it

    SHUTDOWN:
    1. Stop config watcher
    2. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting design fulfillment service", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    init_database()

    logger.info("Loading SLA configuration", extra={"path": str(settings.sla_config_path)})
    sla_config_manager = SLAConfigManager()
    sla_config_manager.load(settings.sla_config_path)
    if settings.watch_sla_config:
        sla_config_manager.start_watching()
    app.state.sla_config_manager = sla_config_manager

    logger.info("Design fulfillment service started")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down design fulfillment service")
    sla_config_manager.stop_watching()
    await close_database()
    logger.info("Design fulfillment service shutdown complete")


app = FastAPI(
    title="Design Fulfillment API",
    description="""
    ## Design-Order Fulfillment Lifecycle and SLA Deadlines

    **Endpoints:**
    - `GET /fulfillment/queue` - Operator work queue with urgency
    - `GET /fulfillment/orders/{id}` - Customer status view for one order
    - `GET /fulfillment/config` - Effective SLA policy

    **Lifecycle:** `pending` → `in_progress` → `delivered` →
    (`revision_requested` → `in_progress` → ...) → `approved`.
    `completed` is derived for display and never stored.

    **Deadlines:** new orders get the package estimate (or the configured
    default); revision cycles get a percentage of it, floored at a minimum
    number of hours, counted from the revision request.

    **Urgency:** `overdue` past the deadline, `urgent` in the last 25% of
    the window, `normal` otherwise.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)
app.state.settings = settings

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)
app.add_exception_handler(ResourceNotFoundException, not_found_handler)
app.add_exception_handler(RepositoryException, service_unavailable_handler)
app.add_exception_handler(ConfigurationException, service_unavailable_handler)
app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(fulfillment_router)


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Health check endpoint for load balancers and orchestrators.

    Reports whether the SLA policy is loaded and being watched.
    """
    manager = getattr(request.app.state, "sla_config_manager", None)
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": {
            "sla_config": "loaded" if manager is not None else "not_loaded",
            "sla_config_watch": "watching" if manager is not None and manager.is_watching else "static"
        }
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "fulfillment": {
                "prefix": "/fulfillment",
                "endpoints": [
                    "GET /fulfillment/queue - Operator work queue",
                    "GET /fulfillment/orders/{id} - Customer order status",
                    "GET /fulfillment/config - Effective SLA policy"
                ]
            }
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info"
    )
