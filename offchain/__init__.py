"""Off-chain profile and stats module.

This module provides functionality for:
- Upserting and reading off-chain user accounts keyed by wallet address
- Creating shareable lootbox stat pages with unique URL slugs
- Reading stat pages, likes and views, optionally with the related
  lootbox and token collection
"""

from typing import Any, Dict, Optional

class OffchainError(Exception):
    """Base exception for off-chain operations."""
    pass

class InvalidAccountError(OffchainError):
    """Raised when account input fails validation."""
    pass

class AccountConflictError(OffchainError):
    """Raised when an upsert collides with another account's email or username."""

    def __init__(self, field: str, details: Optional[str] = None):
        self.field = field
        self.code = f"{field.upper()}_TAKEN"
        self.details = details
        super().__init__(f"{field.capitalize()} already in use")

class InvalidStatsError(OffchainError):
    """Raised when stats creation input fails validation."""
    pass

class LootboxNotFoundError(OffchainError):
    """Raised when stats are requested for a lootbox that does not exist."""
    pass

class StatsConflictError(OffchainError):
    """Raised when stats already exist for a lootbox."""

    def __init__(self, message: str, existing: Optional[Dict[str, Any]] = None):
        self.existing = existing
        super().__init__(message)

class SlugGenerationError(OffchainError):
    """Raised when no unused URL slug was found within the attempt limit."""
    pass

from .accounts import (
    USERNAME_PATTERN,
    validate_account_input,
    get_offchain_accounts,
    get_offchain_account,
    upsert_account
)
from .slugs import MAX_SLUG_ATTEMPTS, validate_slug, url_exists, generate_unique_url
from .relations import attach_relations
from .stats import (
    get_lootbox_stats,
    get_lootbox_likes,
    get_lootbox_views,
    get_creator_lootbox_stats,
    get_lootbox_stats_by_url,
    get_lootbox_stats_url_exists,
    get_lootbox_stats_by_collection,
    get_all_lootbox_stats,
    create_lootbox_stats
)

__all__ = [
    'OffchainError',
    'InvalidAccountError',
    'AccountConflictError',
    'InvalidStatsError',
    'LootboxNotFoundError',
    'StatsConflictError',
    'SlugGenerationError',
    'USERNAME_PATTERN',
    'validate_account_input',
    'get_offchain_accounts',
    'get_offchain_account',
    'upsert_account',
    'MAX_SLUG_ATTEMPTS',
    'validate_slug',
    'url_exists',
    'generate_unique_url',
    'attach_relations',
    'get_lootbox_stats',
    'get_lootbox_likes',
    'get_lootbox_views',
    'get_creator_lootbox_stats',
    'get_lootbox_stats_by_url',
    'get_lootbox_stats_url_exists',
    'get_lootbox_stats_by_collection',
    'get_all_lootbox_stats',
    'create_lootbox_stats'
]
