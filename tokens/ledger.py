"""Append-only token ledger tables.

Each ledger table is read the same way: newest rows first under a fixed
page size, returned under its own response key.
"""
from typing import Dict, Any

from database.records import to_dicts

# table -> (response key, page size)
LEDGER_TABLES = {
    'TokenTransaction': ('transactions', 50),
    'TokenData': ('tokenData', 20),
    'TokenDeposit': ('deposits', 20),
    'TokenWithdraw': ('withdraws', 20),
    'TokenBurn': ('burns', 20),
    'TokenMint': ('mints', 20),
    'TokenClaim': ('claims', 20),
}

async def get_ledger(conn, table: str) -> Dict[str, Any]:
    """Get the newest rows of one ledger table.

    Args:
        conn: Database connection
        table: One of LEDGER_TABLES

    Raises:
        KeyError: If table is not a ledger table
    """
    key, limit = LEDGER_TABLES[table]
    # table name comes from the fixed mapping above, never from a request
    rows = await conn.fetch(
        f'''
        SELECT * FROM "{table}"
        ORDER BY "createdAt" DESC
        LIMIT $1
        ''',
        limit
    )
    return {key: to_dicts(rows)}

async def get_token_transactions(conn) -> Dict[str, Any]:
    return await get_ledger(conn, 'TokenTransaction')

async def get_token_data(conn) -> Dict[str, Any]:
    return await get_ledger(conn, 'TokenData')

async def get_token_deposits(conn) -> Dict[str, Any]:
    return await get_ledger(conn, 'TokenDeposit')

async def get_token_withdraws(conn) -> Dict[str, Any]:
    return await get_ledger(conn, 'TokenWithdraw')

async def get_token_burns(conn) -> Dict[str, Any]:
    return await get_ledger(conn, 'TokenBurn')

async def get_token_mints(conn) -> Dict[str, Any]:
    return await get_ledger(conn, 'TokenMint')

async def get_token_claims(conn) -> Dict[str, Any]:
    return await get_ledger(conn, 'TokenClaim')
