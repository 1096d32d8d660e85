"""On-chain account endpoints."""

from fastapi import APIRouter
from typing import Optional

from accounts import get_accounts, get_account_balances
from ..db import run_query
from ..params import require

router = APIRouter(
    prefix="/api",
    tags=["Accounts"]
)

@router.get("/accounts")
async def list_accounts():
    """Get the newest accounts."""
    return await run_query(get_accounts)

@router.get("/account-balances")
async def account_balances(address: Optional[str] = None):
    """Get every token balance of an account."""
    address = require(address, 'Address required')
    return await run_query(get_account_balances, address)

# Export the router
__all__ = ['router']
