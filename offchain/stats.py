"""Lootbox stat pages, likes and views."""
import logging
from typing import Any, Dict, Optional

from database import QueryBuilder
from database.records import to_dict, to_dicts
from lootboxes import find_lootbox, get_lootbox_by_id
from . import InvalidStatsError, LootboxNotFoundError, StatsConflictError
from .relations import attach_relations
from .slugs import validate_slug, url_exists, generate_unique_url

logger = logging.getLogger(__name__)

STATS_COLUMNS = '''
    SELECT
        s.*,
        (SELECT COUNT(*) FROM "OFFChain_LootboxLike" lk WHERE lk."lootboxStatsId" = s.id) AS "likeCount",
        (SELECT COUNT(*) FROM "OFFChain_LootboxView" v WHERE v."lootboxStatsId" = s.id) AS "viewCount"
    FROM "OFFChain_LootboxStats" s
'''

# Interaction tables share one shape: account x stats, append-only
INTERACTION_TABLES = {
    'likes': 'OFFChain_LootboxLike',
    'views': 'OFFChain_LootboxView',
}

async def get_lootbox_stats(conn, lootbox_id: int) -> Dict[str, Any]:
    """Get a lootbox's stats page with like and view counts, null when absent."""
    stats = await conn.fetchrow(
        STATS_COLUMNS + '''
        WHERE s."lootboxId" = $1
        LIMIT 1
        ''',
        lootbox_id
    )
    return {'stats': to_dict(stats)}

async def _get_interactions(conn, kind: str, lootbox_id: int) -> Dict[str, Any]:
    table = INTERACTION_TABLES[kind]
    rows = await conn.fetch(
        f'''
        SELECT i.*, a."walletAddress", a.username
        FROM "{table}" i
        INNER JOIN "OFFChain_LootboxStats" s ON s.id = i."lootboxStatsId"
        LEFT JOIN "OFFChain_Account" a ON a.id = i."accountId"
        WHERE s."lootboxId" = $1
        ORDER BY i."createdAt" DESC
        ''',
        lootbox_id
    )
    return {kind: to_dicts(rows), 'count': len(rows)}

async def get_lootbox_likes(conn, lootbox_id: int) -> Dict[str, Any]:
    """Get every like on a lootbox's stats page, newest first."""
    return await _get_interactions(conn, 'likes', lootbox_id)

async def get_lootbox_views(conn, lootbox_id: int) -> Dict[str, Any]:
    """Get every view of a lootbox's stats page, newest first."""
    return await _get_interactions(conn, 'views', lootbox_id)

async def get_creator_lootbox_stats(
    conn,
    creator: str,
    include_lootboxes: bool = False,
    include_tokens: bool = False
) -> Dict[str, Any]:
    """Get stats pages for every lootbox of a creator.

    Args:
        conn: Database connection
        creator: Lootbox creator address
        include_lootboxes: Attach each stats row's lootbox
        include_tokens: Attach each lootbox's token collection with tokens

    Returns:
        Dict with the list of stats, newest first
    """
    rows = await conn.fetch(
        STATS_COLUMNS + '''
        INNER JOIN "Lootbox" l ON l.id = s."lootboxId"
        WHERE l."creatorAddress" = $1
        ORDER BY s."createdAt" DESC
        ''',
        creator
    )
    stats = await attach_relations(
        conn,
        to_dicts(rows),
        include_lootbox=include_lootboxes,
        include_tokens=include_tokens
    )
    return {'stats': stats}

async def get_lootbox_stats_by_url(
    conn,
    url: str,
    include_lootbox: bool = False,
    include_tokens: bool = False
) -> Dict[str, Any]:
    """Get the stats page behind a shareable URL.

    Args:
        conn: Database connection
        url: Stats page slug
        include_lootbox: Attach the lootbox
        include_tokens: Attach the lootbox's token collection with tokens

    Returns:
        Dict with the stats, null when the URL is unknown
    """
    row = await conn.fetchrow(
        STATS_COLUMNS + '''
        WHERE s.url = $1
        LIMIT 1
        ''',
        url
    )
    stats = to_dict(row)
    if stats is not None:
        await attach_relations(
            conn,
            [stats],
            include_lootbox=include_lootbox,
            include_tokens=include_tokens
        )
    return {'stats': stats}

async def get_lootbox_stats_url_exists(conn, url: str) -> Dict[str, Any]:
    """Report whether a URL is already used by a stats page."""
    return {'exists': await url_exists(conn, url), 'url': url}

async def get_lootbox_stats_by_collection(
    conn,
    creator: str,
    collection: str,
    include_lootbox: bool = False,
    include_tokens: bool = False
) -> Dict[str, Any]:
    """Get the stats page of the lootbox identified by creator and collection."""
    row = await conn.fetchrow(
        STATS_COLUMNS + '''
        INNER JOIN "Lootbox" l ON l.id = s."lootboxId"
        WHERE l."creatorAddress" = $1
        AND l."collectionName" = $2
        LIMIT 1
        ''',
        creator,
        collection
    )
    stats = to_dict(row)
    if stats is not None:
        await attach_relations(
            conn,
            [stats],
            include_lootbox=include_lootbox,
            include_tokens=include_tokens
        )
    return {'stats': stats}

async def get_all_lootbox_stats(
    conn,
    must_have_url: bool = False,
    is_active: bool = False,
    is_whitelisted: bool = False,
    include_token_collection: bool = False,
    include_tokens: bool = False
) -> Dict[str, Any]:
    """Get every stats page, optionally filtered.

    Filters are conjunctive and only applied when set.

    Args:
        conn: Database connection
        must_have_url: Only pages with a non-empty URL
        is_active: Only pages whose lootbox is active
        is_whitelisted: Only pages whose lootbox is whitelisted
        include_token_collection: Attach each lootbox's token collection
        include_tokens: Attach the token collection with its tokens

    Returns:
        Dict with the list of stats, newest first
    """
    query = QueryBuilder(
        STATS_COLUMNS + '''
        INNER JOIN "Lootbox" l ON l.id = s."lootboxId"
        '''
    )
    query.where_if(must_have_url, "s.url IS NOT NULL AND s.url <> ''")
    query.where_if(is_active, 'l."isActive" = true')
    query.where_if(is_whitelisted, 'l."isWhitelisted" = true')
    query.order_by('s."createdAt" DESC')

    sql, params = query.build()
    rows = await conn.fetch(sql, *params)
    stats = await attach_relations(
        conn,
        to_dicts(rows),
        include_token_collection=include_token_collection,
        include_tokens=include_tokens
    )
    return {'stats': stats}

async def create_lootbox_stats(
    conn,
    url: Optional[str],
    lootbox_id: Optional[int] = None,
    rarity_colors: Optional[Dict[str, Any]] = None,
    creator_address: Optional[str] = None,
    collection_name: Optional[str] = None
) -> Dict[str, Any]:
    """Create the stats page for a lootbox.

    The lootbox is given by id, or by creator address and collection name.
    The desired URL is stored as given, or suffixed if already taken.

    Args:
        conn: Database connection
        url: Desired URL slug
        lootbox_id: Lootbox id
        rarity_colors: Rarity name to colour map
        creator_address: Lootbox creator, used when lootbox_id is absent
        collection_name: Lootbox collection, used when lootbox_id is absent

    Returns:
        Dict with the created stats

    Raises:
        InvalidStatsError: If input is incomplete or the URL is not a slug
        LootboxNotFoundError: If the lootbox does not exist
        StatsConflictError: If the lootbox already has stats
        SlugGenerationError: If no free URL was found
    """
    if lootbox_id is None and not (creator_address and collection_name):
        raise InvalidStatsError("Lootbox ID or creator address and collection name required")
    slug = validate_slug(url)

    if lootbox_id is None:
        lootbox = await find_lootbox(conn, creator_address, collection_name)
        if lootbox is None:
            raise LootboxNotFoundError(
                f"Lootbox {collection_name} by {creator_address} not found"
            )
    else:
        lootbox = await get_lootbox_by_id(conn, lootbox_id)
        if lootbox is None:
            raise LootboxNotFoundError(f"Lootbox {lootbox_id} not found")
    lootbox_id = lootbox['id']

    existing = await conn.fetchrow(
        'SELECT * FROM "OFFChain_LootboxStats" WHERE "lootboxId" = $1 LIMIT 1',
        lootbox_id
    )
    if existing:
        raise StatsConflictError(
            f"Stats already exist for lootbox {lootbox_id}",
            to_dict(existing)
        )

    slug = await generate_unique_url(conn, slug)

    # Unique lootboxId and url constraints turn a concurrent create into no row
    stats = await conn.fetchrow(
        '''
        INSERT INTO "OFFChain_LootboxStats" (
            "lootboxId", url, "rarityColors", "createdAt", "updatedAt"
        )
        VALUES ($1, $2, $3::jsonb, now(), now())
        ON CONFLICT DO NOTHING
        RETURNING *
        ''',
        lootbox_id,
        slug,
        rarity_colors or {}
    )
    if stats is None:
        raise StatsConflictError(
            f"Stats for lootbox {lootbox_id} or URL {slug} were created concurrently"
        )

    logger.info(f"Created stats page {slug} for lootbox {lootbox_id}")
    return {'stats': to_dict(stats)}
