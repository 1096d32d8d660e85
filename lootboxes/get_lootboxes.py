from typing import Dict, Any

from database.records import to_dicts

async def get_lootboxes(conn) -> Dict[str, Any]:
    """Get the 20 newest lootboxes with their analytics.

    Lootbox columns are selected last so the lootbox's own id survives
    the merge with the analytics row.
    """
    lootboxes = await conn.fetch(
        '''
        SELECT la.*, l.*
        FROM "Lootbox" l
        LEFT JOIN "LootboxAnalytics" la ON la."lootboxId" = l.id
        ORDER BY l."createdAt" DESC
        LIMIT 20
        '''
    )
    return {'lootboxes': to_dicts(lootboxes)}

async def get_lootbox_analytics(conn) -> Dict[str, Any]:
    """Get the 20 most recently refreshed analytics rows."""
    analytics = await conn.fetch(
        '''
        SELECT * FROM "LootboxAnalytics"
        ORDER BY "updatedAt" DESC
        LIMIT 20
        '''
    )
    return {'analytics': to_dicts(analytics)}

async def get_lootbox_purchases(conn) -> Dict[str, Any]:
    """Get the 20 latest purchases with collection name and buyer."""
    purchases = await conn.fetch(
        '''
        SELECT
            lp.*,
            l."collectionName",
            a.address AS "buyerAddress"
        FROM "LootboxPurchase" lp
        INNER JOIN "Lootbox" l ON l.id = lp."lootboxId"
        INNER JOIN "Account" a ON a.address = lp."buyerAddress"
        ORDER BY lp."createdAt" DESC
        LIMIT 20
        '''
    )
    return {'purchases': to_dicts(purchases)}

async def get_lootbox_rewards(conn) -> Dict[str, Any]:
    """Get the 20 latest reward line items with their purchase context."""
    rewards = await conn.fetch(
        '''
        SELECT
            lr.*,
            lp."buyerAddress",
            l."collectionName"
        FROM "LootboxReward" lr
        INNER JOIN "LootboxPurchase" lp ON lp.id = lr."purchaseId"
        INNER JOIN "Lootbox" l ON l.id = lp."lootboxId"
        ORDER BY lr."createdAt" DESC
        LIMIT 20
        '''
    )
    return {'rewards': to_dicts(rewards)}
