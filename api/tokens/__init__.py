"""Token, collection, balance and ledger endpoints."""

from fastapi import APIRouter
from typing import Optional

from tokens import (
    get_tokens, get_token_collections, get_token_balances,
    get_tokens_by_lootbox_id, get_tokens_by_creator_and_collection,
    get_tokens_by_lootbox_creator, get_token_collection_by_lootbox_creator,
    get_token_transactions, get_token_data, get_token_deposits,
    get_token_withdraws, get_token_burns, get_token_mints, get_token_claims
)
from ..db import run_query
from ..params import require_all, require_int, flag

router = APIRouter(
    prefix="/api",
    tags=["Tokens"]
)

COLLECTION_REQUIRED = 'Creator address and collection name required'

@router.get("/tokens")
async def list_tokens():
    """Get the newest tokens."""
    return await run_query(get_tokens)

@router.get("/token-collections")
async def list_token_collections():
    """Get the newest token collections."""
    return await run_query(get_token_collections)

@router.get("/token-balances")
async def list_token_balances(
    address: Optional[str] = None,
    greaterThanZeroBalance: Optional[str] = None
):
    """Get recent token balances, optionally for one account and non-zero only."""
    return await run_query(
        get_token_balances,
        address=address or None,
        greater_than_zero=flag(greaterThanZeroBalance)
    )

""" Token ledger """
@router.get("/token-transactions")
async def list_token_transactions():
    return await run_query(get_token_transactions)

@router.get("/token-data")
async def list_token_data():
    return await run_query(get_token_data)

@router.get("/token-deposits")
async def list_token_deposits():
    return await run_query(get_token_deposits)

@router.get("/token-withdraws")
async def list_token_withdraws():
    return await run_query(get_token_withdraws)

@router.get("/token-burns")
async def list_token_burns():
    return await run_query(get_token_burns)

@router.get("/token-mints")
async def list_token_mints():
    return await run_query(get_token_mints)

@router.get("/token-claims")
async def list_token_claims():
    return await run_query(get_token_claims)

""" Tokens by lootbox or collection """
@router.get("/tokens-by-lootbox")
async def tokens_by_lootbox(lootboxId: Optional[str] = None):
    """Get the tokens a lootbox can reward."""
    lootbox_id = require_int(lootboxId, 'Lootbox ID required')
    return await run_query(get_tokens_by_lootbox_id, lootbox_id)

@router.get("/tokens-by-collection")
async def tokens_by_collection(
    creator: Optional[str] = None,
    collection: Optional[str] = None
):
    """Get the tokens of a collection by its creator and name."""
    require_all(COLLECTION_REQUIRED, creator, collection)
    return await run_query(get_tokens_by_creator_and_collection, creator, collection)

@router.get("/tokens-by-lootbox-creator")
async def tokens_by_lootbox_creator(
    creator: Optional[str] = None,
    collection: Optional[str] = None
):
    """Get the tokens behind a lootbox identified by creator and collection."""
    require_all(COLLECTION_REQUIRED, creator, collection)
    return await run_query(get_tokens_by_lootbox_creator, creator, collection)

@router.get("/token-collection-by-lootbox-creator")
async def token_collection_by_lootbox_creator(
    creator: Optional[str] = None,
    collection: Optional[str] = None
):
    """Get the token collection behind a lootbox, tokens included."""
    require_all(COLLECTION_REQUIRED, creator, collection)
    return await run_query(get_token_collection_by_lootbox_creator, creator, collection)

# Export the router
__all__ = ['router']
