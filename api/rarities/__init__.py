"""Rarity endpoints."""

from fastapi import APIRouter
from typing import Optional

from rarities import (
    get_rarities, get_rarities_by_lootbox_id, get_rarities_by_creator_and_collection
)
from ..db import run_query
from ..params import require_all, require_int

router = APIRouter(
    prefix="/api",
    tags=["Rarities"]
)

@router.get("/rarities")
async def list_rarities():
    """Get the newest rarity tiers."""
    return await run_query(get_rarities)

@router.get("/rarities-by-lootbox")
async def rarities_by_lootbox(lootboxId: Optional[str] = None):
    """Get a lootbox's rarity tiers by lootbox id."""
    lootbox_id = require_int(lootboxId, 'Lootbox ID required')
    return await run_query(get_rarities_by_lootbox_id, lootbox_id)

@router.get("/rarities-by-collection")
async def rarities_by_collection(
    creator: Optional[str] = None,
    collection: Optional[str] = None
):
    """Get a lootbox's rarity tiers by creator and collection."""
    require_all('Creator address and collection name required', creator, collection)
    return await run_query(get_rarities_by_creator_and_collection, creator, collection)

# Export the router
__all__ = ['router']
