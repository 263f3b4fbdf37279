"""
Database connection and session management for SQLAlchemy 2.0.
Configured for async operations with SQLite (aiosqlite) or PostgreSQL (asyncpg).
"""
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from sqlalchemy.engine import make_url
from sqlalchemy import text
from pathlib import Path
from urllib.parse import urlparse
import logging
import socket

from showroom.config import settings

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()


def build_engine(url: str) -> AsyncEngine:
    """
    Create an async engine for the given database URL.

    PostgreSQL gets connection pooling; in-memory SQLite shares one
    connection so every session sees the same database.
    """
    engine_args = {
        "echo": False,  # Set to True for SQL query logging in development
    }

    if url.startswith("postgresql"):
        engine_args.update({
            "pool_size": 10,  # Number of connections to maintain in pool
            "max_overflow": 20,  # Additional connections allowed beyond pool_size
            "pool_pre_ping": True,  # Verify connections before using (handles stale connections)
            "pool_recycle": 3600,  # Recycle connections after 1 hour
            "connect_args": {
                "server_settings": {
                    "application_name": "showroom-api"
                }
            }
        })
    elif url.startswith("sqlite") and ":memory:" in url:
        engine_args.update({
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        })

    return create_async_engine(url, **engine_args)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """Create an async session factory bound to an engine."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


engine = build_engine(settings.DATABASE_URL)

# Create async session factory
AsyncSessionLocal = build_session_factory(engine)


def _validate_database_url(url: str) -> tuple[bool, str]:
    """
    Validate database URL and provide diagnostic information.
    Returns (is_valid, diagnostic_message)
    """
    if not url:
        return False, "DATABASE_URL is empty"

    if url.startswith("sqlite"):
        return True, f"SQLite database: {make_url(url).database or ':memory:'}"

    try:
        parsed = urlparse(url)

        if not url.startswith(("postgresql://", "postgresql+asyncpg://")):
            return False, f"Invalid database URL scheme. Expected sqlite+aiosqlite:// or postgresql+asyncpg://, got: {parsed.scheme}"

        hostname = parsed.hostname
        if not hostname:
            return False, "No hostname found in DATABASE_URL"

        try:
            socket.getaddrinfo(hostname, None)
            dns_status = "DNS resolution successful"
        except socket.gaierror as e:
            dns_status = f"DNS resolution failed: {str(e)}. This may indicate network connectivity issues or incorrect hostname."

        return True, f"URL format valid. Hostname: {hostname}, Port: {parsed.port or 5432}, Database: {parsed.path or '/postgres'}. {dns_status}"

    except Exception as e:
        return False, f"Error parsing DATABASE_URL: {str(e)}"


def _ensure_sqlite_directory(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


async def init_db(bind: AsyncEngine = None):
    """
    Initialize database connection and create missing tables.
    Used by the startup event when STORAGE_BACKEND is "sql".
    """
    bind = bind or engine
    url = bind.url.render_as_string(hide_password=False)

    is_valid, diagnostic = _validate_database_url(url)
    if not is_valid:
        logger.error(f"Invalid DATABASE_URL: {diagnostic}")
        raise ValueError(f"Invalid DATABASE_URL: {diagnostic}")

    logger.info(f"Database URL validation: {diagnostic}")

    if url.startswith("sqlite"):
        _ensure_sqlite_directory(url)

    # Register models on Base.metadata
    from showroom import models  # noqa: F401

    try:
        async with bind.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database connection initialized successfully")
    except Exception as e:
        error_msg = str(e)
        if "connection refused" in error_msg.lower() or "timeout" in error_msg.lower():
            logger.error(
                f"Database connection failed - Connection refused/timeout: {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        elif "authentication failed" in error_msg.lower() or "password" in error_msg.lower():
            logger.error(
                f"Database connection failed - Authentication error: {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        else:
            logger.error(
                f"Database connection failed ({type(e).__name__}): {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        raise


async def close_db():
    """
    Close database connections.
    Used by the shutdown event.
    """
    await engine.dispose()
    logger.info("Database connections closed")
