"""Composed fetches that attach lootboxes and token collections to stats."""
from typing import Any, Dict, List

from lootboxes import get_lootboxes_by_ids
from tokens import get_token_collections_by_ids

async def attach_relations(
    conn,
    stats: List[Dict[str, Any]],
    include_lootbox: bool = False,
    include_token_collection: bool = False,
    include_tokens: bool = False
) -> List[Dict[str, Any]]:
    """Merge related rows into stats dicts in place.

    Runs at most two extra statements regardless of how many stats rows
    are given: one for lootboxes, one for token collections. The lootbox
    is fetched whenever a collection is wanted, since the collection id
    lives on the lootbox.

    Args:
        conn: Database connection
        stats: Stats rows as dicts
        include_lootbox: Attach 'lootbox' to each row
        include_token_collection: Attach 'tokenCollection' to each row
        include_tokens: Attach 'tokenCollection' with its 'tokens'

    Returns:
        The same list, for chaining
    """
    want_collection = include_token_collection or include_tokens
    if not stats or not (include_lootbox or want_collection):
        return stats

    lootboxes = await get_lootboxes_by_ids(conn, [s['lootboxId'] for s in stats])
    lootboxes_by_id = {lootbox['id']: lootbox for lootbox in lootboxes}

    collections = {}
    if want_collection:
        collections = await get_token_collections_by_ids(
            conn,
            [lootbox.get('tokenCollectionId') for lootbox in lootboxes],
            include_tokens=include_tokens
        )

    for row in stats:
        lootbox = lootboxes_by_id.get(row['lootboxId'])
        if include_lootbox:
            row['lootbox'] = lootbox
        if want_collection:
            row['tokenCollection'] = (
                collections.get(lootbox.get('tokenCollectionId')) if lootbox else None
            )

    return stats
