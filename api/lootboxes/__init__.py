"""Lootbox endpoints."""

from fastapi import APIRouter
from typing import Optional

from lootboxes import (
    get_lootboxes, get_lootbox_analytics, get_lootbox_purchases,
    get_lootbox_rewards, get_lootbox_by_creator_and_collection
)
from ..db import run_query
from ..params import require_all

router = APIRouter(
    prefix="/api",
    tags=["Lootboxes"]
)

@router.get("/lootboxes")
async def list_lootboxes():
    """Get the newest lootboxes with analytics."""
    return await run_query(get_lootboxes)

@router.get("/lootbox-analytics")
async def list_lootbox_analytics():
    """Get the most recently updated lootbox analytics."""
    return await run_query(get_lootbox_analytics)

@router.get("/lootbox-purchases")
async def list_lootbox_purchases():
    """Get the latest lootbox purchases."""
    return await run_query(get_lootbox_purchases)

@router.get("/lootbox-rewards")
async def list_lootbox_rewards():
    """Get the latest lootbox rewards."""
    return await run_query(get_lootbox_rewards)

@router.get("/lootbox")
async def get_lootbox(
    creator: Optional[str] = None,
    collection: Optional[str] = None
):
    """Get a lootbox by creator and collection.

    Returns {"lootbox": null} with status 200 when no lootbox matches.
    """
    require_all('Creator address and collection name required', creator, collection)
    return await run_query(get_lootbox_by_creator_and_collection, creator, collection)

# Export the router
__all__ = ['router']
