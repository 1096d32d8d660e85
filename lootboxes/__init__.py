"""Lootbox module for on-chain lootbox queries.

This module provides read access to:
- Lootboxes and their rolling analytics
- Purchases and reward line items
- Single lootbox lookup by creator and collection
"""

from .get_lootboxes import (
    get_lootboxes,
    get_lootbox_analytics,
    get_lootbox_purchases,
    get_lootbox_rewards
)
from .get_lootbox import (
    find_lootbox,
    get_lootbox_by_creator_and_collection,
    get_lootbox_by_id,
    get_lootboxes_by_ids
)

__all__ = [
    'get_lootboxes',
    'get_lootbox_analytics',
    'get_lootbox_purchases',
    'get_lootbox_rewards',
    'find_lootbox',
    'get_lootbox_by_creator_and_collection',
    'get_lootbox_by_id',
    'get_lootboxes_by_ids'
]
