"""
FastAPI Application Entry Point.

This is the main application file for the Business Finance Backend.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from backend.app.core.config import settings
from backend.app.api.v1.router import router as api_v1_router
from backend.app.api.v1.endpoints import uploads
from backend.app.core.redis_client import ping_redis
from backend.app.core.observability import ObservabilityMiddleware, configure_logging
from backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from backend.app.db.session import build_engine
from backend.app.services.file_storage import LocalFileStorage
from backend.app.services.notification_service import (
    NotificationService,
    RecipientPolicy,
    recipient_policy_from_name,
)
from backend.app.services.workflow import WorkflowService
from backend.app.store.base import RecordStore
from backend.app.store.memory import MemoryRecordStore
from backend.app.store.sql import SqlRecordStore
from backend.seed_users import seed_users

logger = logging.getLogger("finance")


def build_store() -> RecordStore:
    """Create the record store selected by STORAGE_BACKEND."""
    if settings.storage_backend == "memory":
        return MemoryRecordStore()
    if settings.storage_backend == "sql":
        return SqlRecordStore(build_engine(settings.database_url))
    raise ValueError(f"Unknown storage backend '{settings.storage_backend}' (expected 'memory' or 'sql')")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.
    
    1. Creates database tables when the sql store is used.
    2. Seeds the demo accountant and client.
    3. Releases store resources on shutdown.
    """
    store: RecordStore = app.state.store
    if isinstance(store, SqlRecordStore):
        await store.create_schema()
    if settings.seed_demo_users:
        await seed_users(store)
    app.state.file_storage.ensure_root()
    logger.info("Application started", extra={"storage_backend": type(store).__name__})
    yield
    await store.close()


def create_app(
    store: Optional[RecordStore] = None,
    recipient_policy: Optional[RecipientPolicy] = None,
    file_storage: Optional[LocalFileStorage] = None,
) -> FastAPI:
    """
    Build the application around one record store.
    
    Tests pass a fresh store per test; production builds it from settings.
    """
    configure_logging(settings.log_level)
    
    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        debug=settings.debug,
        description="Shared financial records between small-business clients and their accountant",
        lifespan=lifespan,
    )
    
    store = store or build_store()
    notifications = NotificationService(
        store,
        recipient_policy or recipient_policy_from_name(settings.accountant_notification_policy),
    )
    app.state.store = store
    app.state.workflow = WorkflowService(store, notifications)
    app.state.file_storage = file_storage or LocalFileStorage(
        settings.upload_dir,
        settings.max_upload_bytes,
        settings.allowed_upload_types,
    )
    
    # Register global exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    
    app.add_middleware(ObservabilityMiddleware)
    
    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint.
        
        Returns:
            dict: Status and application information
        """
        return {
            "status": "healthy",
            "app_name": settings.app_name,
            "version": settings.api_version,
            "redis": "connected" if await ping_redis() else "unavailable",
        }
    
    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint.
        
        Returns:
            dict: Welcome message and API documentation links
        """
        return {
            "message": "Welcome to the Business Finance Backend API",
            "docs": "/docs",
            "health": "/health",
        }
    
    # Include API v1 router
    app.include_router(api_v1_router, prefix=f"/{settings.api_version}")
    
    # Stored attachments keep their /uploads/<name> URL
    app.include_router(uploads.router)
    
    return app


app = create_app()
