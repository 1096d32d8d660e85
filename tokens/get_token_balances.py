""" Token balances with optional account and non-zero filters """
from typing import Dict, Any, Optional
import logging

from database import QueryBuilder
from database.records import to_dicts

logger = logging.getLogger(__name__)

async def get_token_balances(
        conn,
        address: Optional[str] = None,
        greater_than_zero: bool = False,
        limit: int = 20
    ) -> Dict[str, Any]:
        """Get the most recently updated token balances.

        Args:
            conn: Database connection
            address: Optional account address to filter by
            greater_than_zero: Only return balances above zero
            limit: Maximum number of rows (default: 20)

        Returns:
            Dict containing the matching balances
        """
        query = QueryBuilder(
            '''
            SELECT
                tb.*,
                t."tokenName",
                t."tokenUri",
                a.address AS "accountAddress"
            FROM "TokenBalance" tb
            INNER JOIN "Account" a ON a.address = tb."accountAddress"
            LEFT JOIN "Token" t ON t.id = tb."tokenId"
            '''
        )
        query.where_if(address, 'tb."accountAddress" = {}', address)
        query.where_if(greater_than_zero, 'tb."balance" > 0')
        query.order_by('tb."lastUpdated" DESC').limit(limit)

        sql, params = query.build()
        logger.debug("Executing token balance query: %s with params: %r", sql, params)

        balances = await conn.fetch(sql, *params)
        return {'balances': to_dicts(balances)}
