"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support. Only the sql record store uses it.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from backend.app.core.config import settings

# Create declarative base for models
Base = declarative_base()


def build_engine(database_url: str = None, echo: bool = None) -> AsyncEngine:
    """
    Create an async engine for the given URL.
    
    Pool sizing only applies to server databases; SQLite uses its own pool.
    """
    database_url = database_url or settings.database_url
    options = {
        "echo": settings.db_echo if echo is None else echo,
        "future": True,
    }
    if not database_url.startswith("sqlite"):
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    return create_async_engine(database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create an async session factory bound to engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
