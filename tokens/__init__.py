"""Tokens module for token, collection, balance and ledger queries.

This module provides read access to:
- Tokens with collection and rarity context
- Token collections, optionally with their tokens
- Account token balances
- The append-only token ledger (transactions, deposits, withdraws,
  burns, mints, claims and token data)
"""

from .get_tokens import (
    get_tokens,
    get_tokens_by_lootbox_id,
    get_tokens_by_creator_and_collection,
    get_tokens_by_lootbox_creator
)
from .get_token_collections import (
    get_token_collections,
    get_token_collection_by_lootbox_creator,
    get_token_collections_by_ids
)
from .get_token_balances import get_token_balances
from .ledger import (
    LEDGER_TABLES,
    get_ledger,
    get_token_transactions,
    get_token_data,
    get_token_deposits,
    get_token_withdraws,
    get_token_burns,
    get_token_mints,
    get_token_claims
)

__all__ = [
    'get_tokens',
    'get_tokens_by_lootbox_id',
    'get_tokens_by_creator_and_collection',
    'get_tokens_by_lootbox_creator',
    'get_token_collections',
    'get_token_collection_by_lootbox_creator',
    'get_token_collections_by_ids',
    'get_token_balances',
    'LEDGER_TABLES',
    'get_ledger',
    'get_token_transactions',
    'get_token_data',
    'get_token_deposits',
    'get_token_withdraws',
    'get_token_burns',
    'get_token_mints',
    'get_token_claims'
]
