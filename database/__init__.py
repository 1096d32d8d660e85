"""Database module for managing connections to the lootbox PostgreSQL store.

This module handles:
- Database connection pool initialization
- JSON codec registration for jsonb columns
- Connection lifecycle
"""

import json
import logging
from typing import Optional, Dict, Any
import backoff
import asyncpg
from urllib.parse import urlparse, parse_qs

from .exceptions import DatabaseError
from .query import QueryBuilder

logger = logging.getLogger(__name__)

_pool: Optional[asyncpg.Pool] = None

def _get_connection_kwargs(db_url: str) -> Dict[str, Any]:
    """Get connection kwargs from database URL.

    Args:
        db_url: Database connection URL

    Returns:
        Dict of connection parameters
    """
    # asyncpg parses sslmode and friends from the DSN itself
    params = parse_qs(urlparse(db_url).query)
    if 'application_name' in params:
        return {}
    return {'server_settings': {'application_name': 'lootbox-api'}}

async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode json and jsonb columns into Python objects."""
    for type_name in ('json', 'jsonb'):
        await conn.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema='pg_catalog'
        )

@backoff.on_exception(
    backoff.expo,
    (OSError, asyncpg.exceptions.PostgresConnectionError, asyncpg.exceptions.CannotConnectNowError),
    max_tries=5
)
async def init_db(db_url: Optional[str] = None) -> asyncpg.Pool:
    """Initialize the database connection pool.

    Args:
        db_url: Optional database URL. If not provided, will use settings.

    Returns:
        The created connection pool

    Raises:
        DatabaseError: If database URL is not provided
        Exception: If initialization fails after retries
    """
    global _pool

    # Import here to avoid circular imports
    from config import get_settings

    settings = get_settings()
    url = db_url or settings.db_url
    if not url:
        raise DatabaseError("Database URL not provided")

    try:
        _pool = await asyncpg.create_pool(
            url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            max_inactive_connection_lifetime=300.0,  # 5 minutes
            command_timeout=settings.command_timeout,
            init=_init_connection,
            **_get_connection_kwargs(url)
        )
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    logger.info(
        f"Database pool ready (min={settings.pool_min_size}, max={settings.pool_max_size})"
    )
    return _pool

async def get_pool() -> asyncpg.Pool:
    """Get the database connection pool.

    Returns:
        The connection pool

    Raises:
        DatabaseError: If pool hasn't been initialized
    """
    if not _pool:
        await init_db()
    if not _pool:
        raise DatabaseError("Failed to initialize database pool")
    return _pool

async def close() -> None:
    """Close the database connection pool."""
    global _pool

    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")

# Export public interface
__all__ = ['init_db', 'get_pool', 'close', 'DatabaseError', 'QueryBuilder']
