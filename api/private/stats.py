"""Lootbox stats endpoints."""

import logging
from fastapi import APIRouter, HTTPException, status
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field

from offchain import (
    InvalidStatsError, LootboxNotFoundError, StatsConflictError, SlugGenerationError,
    get_lootbox_stats, get_lootbox_likes, get_lootbox_views,
    get_creator_lootbox_stats, get_lootbox_stats_by_url,
    get_lootbox_stats_url_exists, get_lootbox_stats_by_collection,
    get_all_lootbox_stats, create_lootbox_stats
)
from ..db import run_query
from ..params import require, require_all, require_int, flag

logger = logging.getLogger(__name__)

router = APIRouter()

class CreateLootboxStatsRequest(BaseModel):
    """Request model for creating a lootbox stats page."""
    lootboxId: Optional[int] = Field(None, description="Lootbox id")
    url: Optional[str] = Field(None, description="Desired URL slug")
    rarityColors: Optional[Dict[str, Any]] = Field(None, description="Rarity name to colour map")
    creatorAddress: Optional[str] = Field(None, description="Lootbox creator, used when lootboxId is absent")
    collectionName: Optional[str] = Field(None, description="Lootbox collection, used when lootboxId is absent")

@router.get("/lootbox-stats")
async def lootbox_stats(lootboxId: Optional[str] = None):
    """Get a lootbox's stats page with like and view counts."""
    lootbox_id = require_int(lootboxId, 'Lootbox ID required')
    return await run_query(get_lootbox_stats, lootbox_id)

@router.get("/lootbox-likes")
async def lootbox_likes(lootboxId: Optional[str] = None):
    """Get the likes on a lootbox's stats page."""
    lootbox_id = require_int(lootboxId, 'Lootbox ID required')
    return await run_query(get_lootbox_likes, lootbox_id)

@router.get("/lootbox-views")
async def lootbox_views(lootboxId: Optional[str] = None):
    """Get the views of a lootbox's stats page."""
    lootbox_id = require_int(lootboxId, 'Lootbox ID required')
    return await run_query(get_lootbox_views, lootbox_id)

@router.get("/creator-lootbox-stats")
async def creator_lootbox_stats(
    creator: Optional[str] = None,
    includeLootboxes: Optional[str] = None,
    includeTokens: Optional[str] = None
):
    """Get the stats pages of every lootbox by a creator."""
    creator = require(creator, 'Creator address required')
    return await run_query(
        get_creator_lootbox_stats,
        creator,
        include_lootboxes=flag(includeLootboxes),
        include_tokens=flag(includeTokens)
    )

@router.get("/lootbox-stats-by-url")
async def lootbox_stats_by_url(
    url: Optional[str] = None,
    includeLootbox: Optional[str] = None,
    includeTokens: Optional[str] = None
):
    """Get the stats page behind a shareable URL."""
    url = require(url, 'URL required')
    return await run_query(
        get_lootbox_stats_by_url,
        url,
        include_lootbox=flag(includeLootbox),
        include_tokens=flag(includeTokens)
    )

@router.get("/lootbox-stats-url-exists")
async def lootbox_stats_url_exists(url: Optional[str] = None):
    """Check whether a URL is already taken."""
    url = require(url, 'URL required')
    return await run_query(get_lootbox_stats_url_exists, url)

@router.post("/lootbox-stats/create", status_code=status.HTTP_201_CREATED)
async def create_stats(request: CreateLootboxStatsRequest):
    """Create the stats page for a lootbox.

    Args:
        request: The lootbox (by id, or by creator and collection), the
                 desired URL and the rarity colour map

    Returns:
        Dict with the created stats

    Raises:
        HTTPException: 400 on invalid input, 404 for an unknown lootbox,
                       409 when stats already exist, 500 when no free URL
                       could be found
    """
    require(request.url, 'URL required')
    try:
        return await run_query(
            create_lootbox_stats,
            request.url,
            lootbox_id=request.lootboxId,
            rarity_colors=request.rarityColors,
            creator_address=request.creatorAddress,
            collection_name=request.collectionName
        )
    except InvalidStatsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except LootboxNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except StatsConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": str(e),
                "stats": e.existing
            }
        )
    except SlugGenerationError as e:
        logger.error(f"Slug generation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

@router.get("/lootbox-stats-by-collection")
async def lootbox_stats_by_collection(
    creator: Optional[str] = None,
    collection: Optional[str] = None,
    includeLootbox: Optional[str] = None,
    includeTokens: Optional[str] = None
):
    """Get the stats page of a lootbox by creator and collection."""
    require_all('Creator address and collection name required', creator, collection)
    return await run_query(
        get_lootbox_stats_by_collection,
        creator,
        collection,
        include_lootbox=flag(includeLootbox),
        include_tokens=flag(includeTokens)
    )

@router.get("/all-lootbox-stats")
async def all_lootbox_stats(
    mustHaveUrl: Optional[str] = None,
    isActive: Optional[str] = None,
    isWhitelisted: Optional[str] = None,
    includeTokenCollection: Optional[str] = None,
    includeTokens: Optional[str] = None
):
    """Get every stats page, filtered by the flags that are set."""
    return await run_query(
        get_all_lootbox_stats,
        must_have_url=flag(mustHaveUrl),
        is_active=flag(isActive),
        is_whitelisted=flag(isWhitelisted),
        include_token_collection=flag(includeTokenCollection),
        include_tokens=flag(includeTokens)
    )
