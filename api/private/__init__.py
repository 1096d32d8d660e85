"""Private endpoints for off-chain accounts and lootbox stats.

Every path here sits under the private prefix, so requests only reach
these handlers after the API key check in the edge middleware.
"""

from fastapi import APIRouter

router = APIRouter(
    prefix="/api/private",
    tags=["Private"]
)

from .accounts import router as accounts_router
from .stats import router as stats_router

router.include_router(accounts_router)
router.include_router(stats_router)

# Export the router
__all__ = ['router']
