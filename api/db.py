"""Connection scoping for request handlers."""
import logging
from typing import Any, Awaitable, Callable

import asyncpg
from fastapi import HTTPException, status

from database import get_pool

logger = logging.getLogger(__name__)

async def run_query(query: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
    """Run a query handler on a pooled connection.

    The connection is released when the handler returns or raises.
    Database errors become a 500 carrying the database's message; any
    other exception propagates to the caller.

    Args:
        query: Coroutine function taking the connection first
        args: Positional arguments after the connection
        kwargs: Keyword arguments for the handler

    Returns:
        The handler's result
    """
    pool = await get_pool()
    async with pool.acquire() as conn:
        try:
            return await query(conn, *args, **kwargs)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error in {query.__name__}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e)
            )
