"""Off-chain account endpoints."""

from fastapi import APIRouter, HTTPException, status
from typing import Optional

from offchain import (
    InvalidAccountError, AccountConflictError, validate_account_input,
    get_offchain_accounts, get_offchain_account, upsert_account
)
from ..db import run_query
from ..params import require

router = APIRouter()

@router.get("/accounts")
async def list_accounts():
    """Get the newest off-chain accounts."""
    return await run_query(get_offchain_accounts)

@router.get("/account")
async def get_account(address: Optional[str] = None):
    """Get an off-chain account by wallet address."""
    address = require(address, 'Address required')
    return await run_query(get_offchain_account, address)

@router.api_route("/account/upsert", methods=["GET", "POST"])
async def upsert(
    walletAddress: Optional[str] = None,
    email: Optional[str] = None,
    username: Optional[str] = None,
    preferences: Optional[str] = None
):
    """Create or update the account for a wallet address.

    Args:
        walletAddress: Wallet address (required)
        email: Optional email
        username: Optional username, 3-30 of [a-zA-Z0-9_-]
        preferences: Optional JSON-encoded object

    Returns:
        Dict with the stored account

    Raises:
        HTTPException: 400 on invalid input or a taken email/username
    """
    try:
        fields = validate_account_input(walletAddress, email, username, preferences)
    except InvalidAccountError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    try:
        return await run_query(upsert_account, *fields)
    except AccountConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": str(e),
                "code": e.code,
                "details": e.details
            }
        )
