from typing import Dict, Any, Sequence

from database.records import to_dict, to_dicts

# Tokens of a collection folded into one jsonb array, rarity attached
TOKENS_DOCUMENT = '''
    COALESCE((
        SELECT jsonb_agg(
            to_jsonb(t) || jsonb_build_object(
                'rarityName', r."rarityName",
                'rarityWeight', r."weight"
            )
            ORDER BY r."weight" DESC, t."tokenName" ASC
        )
        FROM "Token" t
        LEFT JOIN "Rarity" r ON r.id = t."rarityId"
        WHERE t."tokenCollectionId" = tc.id
    ), '[]'::jsonb) AS tokens
'''

async def get_token_collections(conn) -> Dict[str, Any]:
    """Get the 20 newest token collections."""
    collections = await conn.fetch(
        '''
        SELECT * FROM "TokenCollection"
        ORDER BY "createdAt" DESC
        LIMIT 20
        '''
    )
    return {'collections': to_dicts(collections)}

async def get_token_collection_by_lootbox_creator(
    conn,
    creator_address: str,
    collection_name: str
) -> Dict[str, Any]:
    """Get the token collection behind a lootbox, tokens included.

    Args:
        conn: Database connection
        creator_address: Lootbox creator address
        collection_name: Lootbox collection name

    Returns:
        Dict with the collection (null when the lootbox has none)
    """
    collection = await conn.fetchrow(
        'SELECT tc.*,' + TOKENS_DOCUMENT + '''
        FROM "TokenCollection" tc
        INNER JOIN "Lootbox" l ON l."collectionResourceAddress" = tc.creator
        WHERE l."creatorAddress" = $1
        AND l."collectionName" = $2
        LIMIT 1
        ''',
        creator_address,
        collection_name
    )
    return {'collection': to_dict(collection)}

async def get_token_collections_by_ids(
    conn,
    collection_ids: Sequence[int],
    include_tokens: bool = False
) -> Dict[Any, Dict[str, Any]]:
    """Get token collections keyed by id.

    Args:
        conn: Database connection
        collection_ids: Collection ids, duplicates and None are ignored
        include_tokens: Attach each collection's tokens as a list

    Returns:
        Dict mapping collection id to collection
    """
    ids = sorted({cid for cid in collection_ids if cid is not None})
    if not ids:
        return {}

    columns = 'tc.*,' + TOKENS_DOCUMENT if include_tokens else 'tc.*'
    collections = await conn.fetch(
        f'''
        SELECT {columns}
        FROM "TokenCollection" tc
        WHERE tc.id = ANY($1)
        ''',
        ids
    )
    return {c['id']: c for c in to_dicts(collections)}
