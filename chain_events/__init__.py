"""Raw chain event and randomness-oracle callback logs."""

from typing import Dict, Any

from database.records import to_dicts

async def get_event_tracking(conn) -> Dict[str, Any]:
    """Get the 50 most recent indexed chain events, highest block first."""
    events = await conn.fetch(
        '''
        SELECT * FROM "EventTracking"
        ORDER BY "blockHeight" DESC
        LIMIT 50
        '''
    )
    return {'events': to_dicts(events)}

async def get_vrf_callbacks(conn) -> Dict[str, Any]:
    """Get the 20 most recent VRF callbacks."""
    callbacks = await conn.fetch(
        '''
        SELECT * FROM "VRFCallback"
        ORDER BY "timestamp" DESC
        LIMIT 20
        '''
    )
    return {'callbacks': to_dicts(callbacks)}

__all__ = ['get_event_tracking', 'get_vrf_callbacks']
