"""Chain event and VRF callback endpoints."""

from fastapi import APIRouter

from chain_events import get_event_tracking, get_vrf_callbacks
from ..db import run_query

router = APIRouter(
    prefix="/api",
    tags=["Events"]
)

@router.get("/event-tracking")
async def list_events():
    """Get the most recent indexed chain events."""
    return await run_query(get_event_tracking)

@router.get("/vrf-callbacks")
async def list_vrf_callbacks():
    """Get the most recent randomness-oracle callbacks."""
    return await run_query(get_vrf_callbacks)

# Export the router
__all__ = ['router']
