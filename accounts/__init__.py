"""On-chain account queries."""

from typing import Dict, Any

from database.records import to_dicts

async def get_accounts(conn) -> Dict[str, Any]:
    """Get the 20 most recently created accounts."""
    accounts = await conn.fetch(
        '''
        SELECT * FROM "Account"
        ORDER BY "createdAt" DESC
        LIMIT 20
        '''
    )
    return {'accounts': to_dicts(accounts)}

async def get_account_balances(conn, address: str) -> Dict[str, Any]:
    """Get every token balance held by an account.

    Args:
        conn: Database connection
        address: The account address

    Returns:
        Dict with the account's balances, most recently updated first
    """
    balances = await conn.fetch(
        '''
        SELECT tb.*, t."tokenName"
        FROM "TokenBalance" tb
        LEFT JOIN "Token" t ON t.id = tb."tokenId"
        WHERE tb."accountAddress" = $1
        ORDER BY tb."lastUpdated" DESC
        ''',
        address
    )
    return {'balances': to_dicts(balances)}

__all__ = ['get_accounts', 'get_account_balances']
