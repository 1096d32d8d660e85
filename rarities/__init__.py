"""Rarity tier queries."""

from typing import Dict, Any

from database.records import to_dicts

async def get_rarities(conn) -> Dict[str, Any]:
    """Get the 20 newest rarity tiers with their lootbox collection name."""
    rarities = await conn.fetch(
        '''
        SELECT r.*, l."collectionName"
        FROM "Rarity" r
        LEFT JOIN "Lootbox" l ON l.id = r."lootboxId"
        ORDER BY r."createdAt" DESC
        LIMIT 20
        '''
    )
    return {'rarities': to_dicts(rarities)}

async def get_rarities_by_lootbox_id(conn, lootbox_id: int) -> Dict[str, Any]:
    """Get a lootbox's rarity tiers, heaviest weight first."""
    rarities = await conn.fetch(
        '''
        SELECT r.*, l."collectionName"
        FROM "Rarity" r
        LEFT JOIN "Lootbox" l ON l.id = r."lootboxId"
        WHERE r."lootboxId" = $1
        ORDER BY r."weight" DESC
        ''',
        lootbox_id
    )
    return {'rarities': to_dicts(rarities)}

async def get_rarities_by_creator_and_collection(conn, creator: str, collection: str) -> Dict[str, Any]:
    """Get rarity tiers of the lootbox identified by creator and collection.

    Args:
        conn: Database connection
        creator: Lootbox creator address
        collection: Lootbox collection name

    Returns:
        Dict of rarities, heaviest weight first
    """
    rarities = await conn.fetch(
        '''
        SELECT r.*, l."collectionName"
        FROM "Rarity" r
        INNER JOIN "Lootbox" l ON l.id = r."lootboxId"
        WHERE l."creatorAddress" = $1
        AND l."collectionName" = $2
        ORDER BY r."weight" DESC
        ''',
        creator,
        collection
    )
    return {'rarities': to_dicts(rarities)}

__all__ = [
    'get_rarities',
    'get_rarities_by_lootbox_id',
    'get_rarities_by_creator_and_collection'
]
