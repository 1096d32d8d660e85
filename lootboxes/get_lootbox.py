from typing import Dict, Any, List, Optional, Sequence

from database.records import to_dict, to_dicts

LOOTBOX_COLUMNS = '''
    SELECT la.*, l.*
    FROM "Lootbox" l
    LEFT JOIN "LootboxAnalytics" la ON la."lootboxId" = l.id
'''

async def find_lootbox(conn, creator: str, collection: str) -> Optional[Dict[str, Any]]:
    """Find a lootbox by its natural key.

    Args:
        conn: Database connection
        creator: Creator address
        collection: Collection name

    Returns:
        The lootbox row merged with its analytics, or None
    """
    lootbox = await conn.fetchrow(
        LOOTBOX_COLUMNS + '''
        WHERE l."creatorAddress" = $1
        AND l."collectionName" = $2
        LIMIT 1
        ''',
        creator,
        collection
    )
    return to_dict(lootbox)

async def get_lootbox_by_creator_and_collection(conn, creator: str, collection: str) -> Dict[str, Any]:
    """Get a lootbox by creator and collection, null when absent."""
    return {'lootbox': await find_lootbox(conn, creator, collection)}

async def get_lootbox_by_id(conn, lootbox_id: int) -> Optional[Dict[str, Any]]:
    """Get a lootbox with its analytics by id, or None."""
    lootbox = await conn.fetchrow(
        LOOTBOX_COLUMNS + '''
        WHERE l.id = $1
        LIMIT 1
        ''',
        lootbox_id
    )
    return to_dict(lootbox)

async def get_lootboxes_by_ids(conn, lootbox_ids: Sequence[int]) -> List[Dict[str, Any]]:
    """Get several lootboxes at once, in no particular order."""
    if not lootbox_ids:
        return []
    lootboxes = await conn.fetch(
        LOOTBOX_COLUMNS + '''
        WHERE l.id = ANY($1)
        ''',
        list(lootbox_ids)
    )
    return to_dicts(lootboxes)
