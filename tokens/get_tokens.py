from typing import Dict, Any

from database.records import to_dicts

TOKEN_WITH_RARITY = '''
    SELECT
        t.*,
        r."rarityName",
        r."weight" AS "rarityWeight",
        tc."name" AS "collectionName"
    FROM "Token" t
    INNER JOIN "TokenCollection" tc ON tc.id = t."tokenCollectionId"
    LEFT JOIN "Rarity" r ON r.id = t."rarityId"
'''

RARITY_ORDER = 'ORDER BY r."weight" DESC, t."tokenName" ASC'

async def get_tokens(conn) -> Dict[str, Any]:
    """Get the 20 newest tokens with their collection name."""
    tokens = await conn.fetch(
        '''
        SELECT t.*, tc."name" AS "collectionName"
        FROM "Token" t
        LEFT JOIN "TokenCollection" tc ON tc.id = t."tokenCollectionId"
        ORDER BY t."createdAt" DESC
        LIMIT 20
        '''
    )
    return {'tokens': to_dicts(tokens)}

async def get_tokens_by_lootbox_id(conn, lootbox_id: int) -> Dict[str, Any]:
    """Get every token in the collection a lootbox draws from.

    Args:
        conn: Database connection
        lootbox_id: Lootbox id

    Returns:
        Dict of tokens ordered by rarity weight, then name
    """
    tokens = await conn.fetch(
        TOKEN_WITH_RARITY + '''
        WHERE tc.id = (
            SELECT "tokenCollectionId"
            FROM "Lootbox"
            WHERE id = $1
        )
        ''' + RARITY_ORDER,
        lootbox_id
    )
    return {'tokens': to_dicts(tokens)}

async def get_tokens_by_creator_and_collection(conn, creator: str, collection: str) -> Dict[str, Any]:
    """Get tokens of the collection identified by its creator and name."""
    tokens = await conn.fetch(
        TOKEN_WITH_RARITY + '''
        WHERE tc.creator = $1
        AND tc.name = $2
        ''' + RARITY_ORDER,
        creator,
        collection
    )
    return {'tokens': to_dicts(tokens)}

async def get_tokens_by_lootbox_creator(conn, creator_address: str, collection_name: str) -> Dict[str, Any]:
    """Get tokens of the collection owned by a lootbox's resource account.

    Args:
        conn: Database connection
        creator_address: Lootbox creator address
        collection_name: Lootbox collection name

    Returns:
        Dict of tokens with the lootbox creator and resource address attached
    """
    tokens = await conn.fetch(
        '''
        SELECT DISTINCT
            t.*,
            r."rarityName",
            r."weight" AS "rarityWeight",
            tc."name" AS "collectionName",
            l."creatorAddress" AS "lootboxCreator",
            l."collectionResourceAddress"
        FROM "Token" t
        INNER JOIN "TokenCollection" tc ON tc.id = t."tokenCollectionId"
        LEFT JOIN "Rarity" r ON r.id = t."rarityId"
        INNER JOIN "Lootbox" l ON l."collectionResourceAddress" = tc.creator
        WHERE l."creatorAddress" = $1
        AND l."collectionName" = $2
        ''' + RARITY_ORDER,
        creator_address,
        collection_name
    )
    return {'tokens': to_dicts(tokens)}
