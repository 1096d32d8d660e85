"""Off-chain user accounts, one row per wallet address."""
import json
import logging
import re
from typing import Any, Dict, Optional, Tuple

import asyncpg

from database.records import to_dict, to_dicts
from . import InvalidAccountError, AccountConflictError

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9_-]{3,30}$')
EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

def validate_account_input(
    wallet_address: Optional[str],
    email: Optional[str] = None,
    username: Optional[str] = None,
    preferences: Optional[str] = None
) -> Tuple[str, Optional[str], Optional[str], Optional[Dict[str, Any]]]:
    """Validate and normalise upsert input.

    Empty strings are treated as absent so that a blank query parameter
    never overwrites a stored value.

    Args:
        wallet_address: Required wallet address
        email: Optional email address
        username: Optional username, 3-30 characters of [a-zA-Z0-9_-]
        preferences: Optional JSON-encoded object

    Returns:
        Tuple of (wallet_address, email, username, preferences dict)

    Raises:
        InvalidAccountError: If any field is invalid
    """
    wallet_address = (wallet_address or '').strip()
    if not wallet_address:
        raise InvalidAccountError("Wallet address required")

    email = (email or '').strip() or None
    if email is not None and not EMAIL_PATTERN.match(email):
        raise InvalidAccountError("Invalid email address")

    username = (username or '').strip() or None
    if username is not None and not USERNAME_PATTERN.match(username):
        raise InvalidAccountError(
            "Username must be 3-30 characters and contain only letters, numbers, underscores and hyphens"
        )

    parsed_preferences = None
    if preferences:
        try:
            parsed_preferences = json.loads(preferences)
        except ValueError:
            raise InvalidAccountError("Preferences must be valid JSON")
        if not isinstance(parsed_preferences, dict):
            raise InvalidAccountError("Preferences must be a JSON object")

    return wallet_address, email, username, parsed_preferences

async def get_offchain_accounts(conn) -> Dict[str, Any]:
    """Get the 20 most recently created off-chain accounts."""
    accounts = await conn.fetch(
        '''
        SELECT * FROM "OFFChain_Account"
        ORDER BY "createdAt" DESC
        LIMIT 20
        '''
    )
    return {'accounts': to_dicts(accounts)}

async def get_offchain_account(conn, wallet_address: str) -> Dict[str, Any]:
    """Get an off-chain account by wallet address, null when absent."""
    account = await conn.fetchrow(
        '''
        SELECT * FROM "OFFChain_Account"
        WHERE "walletAddress" = $1
        LIMIT 1
        ''',
        wallet_address
    )
    return {'account': to_dict(account)}

async def upsert_account(
    conn,
    wallet_address: str,
    email: Optional[str] = None,
    username: Optional[str] = None,
    preferences: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Create or update the account for a wallet address.

    Concurrent upserts for the same wallet resolve last-write-wins. Fields
    passed as None keep their stored value on update.

    Args:
        conn: Database connection
        wallet_address: Wallet address (conflict key)
        email: Optional email
        username: Optional username
        preferences: Optional preference document

    Returns:
        Dict with the stored account

    Raises:
        AccountConflictError: If email or username belongs to another account
    """
    try:
        account = await conn.fetchrow(
            '''
            INSERT INTO "OFFChain_Account" (
                "walletAddress", email, username, preferences,
                "lastLoginAt", "createdAt", "updatedAt"
            )
            VALUES ($1, $2, $3, COALESCE($4::jsonb, '{}'::jsonb), now(), now(), now())
            ON CONFLICT ("walletAddress") DO UPDATE SET
                email = COALESCE($2, "OFFChain_Account".email),
                username = COALESCE($3, "OFFChain_Account".username),
                preferences = COALESCE($4::jsonb, "OFFChain_Account".preferences),
                "lastLoginAt" = now(),
                "updatedAt" = now()
            RETURNING *
            ''',
            wallet_address,
            email,
            username,
            preferences
        )
    except asyncpg.exceptions.UniqueViolationError as e:
        constraint = getattr(e, 'constraint_name', None) or ''
        detail = getattr(e, 'detail', None)
        violated = f"{constraint} {detail or ''}".lower()
        for field in ('email', 'username'):
            if field in violated:
                logger.info(f"Rejected upsert for {wallet_address}: {field} taken")
                raise AccountConflictError(field, detail)
        raise

    logger.info(f"Upserted off-chain account {wallet_address}")
    return {'account': to_dict(account)}
