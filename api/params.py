"""Query-string parameter helpers.

Every route reads its parameters as optional strings and validates them
here, so a missing value is reported as 400 with a field-specific message
before any connection is acquired.
"""
import re
from typing import Optional

from fastapi import HTTPException, status

INTEGER_PATTERN = re.compile(r'-?[0-9]+')

# Id columns are PostgreSQL int4
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

def require(value: Optional[str], message: str) -> str:
    """Return value, or fail with 400 when it is missing or empty."""
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return value

def require_all(message: str, *values: Optional[str]) -> None:
    """Fail with a single 400 message unless every value is present."""
    if not all(values):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

def require_int(value: Optional[str], message: str) -> int:
    """Return value parsed as a 32-bit integer, or fail with 400."""
    value = require(value, message)
    if not INTEGER_PATTERN.fullmatch(value) or not INT_MIN <= int(value) <= INT_MAX:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{message}: {value!r} is not an integer"
        )
    return int(value)

def flag(value: Optional[str]) -> bool:
    """Boolean flags are set only by the literal string 'true'."""
    return value == 'true'
