"""Conversion of asyncpg records into JSON-ready dicts."""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
import uuid

def _convert(value: Any) -> Any:
    # NUMERIC columns hold on-chain amounts, keep them exact as strings
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    return value

def to_dict(record: Optional[Any]) -> Optional[Dict[str, Any]]:
    """Convert a single record, passing None through."""
    if record is None:
        return None
    return {key: _convert(value) for key, value in record.items()}

def to_dicts(records: Iterable[Any]) -> List[Dict[str, Any]]:
    """Convert a list of records."""
    return [to_dict(record) for record in records]
