"""Shareable URL slugs for lootbox stat pages."""
import logging
import random
import re

from . import InvalidStatsError, SlugGenerationError

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 10
SLUG_SUFFIX_RANGE = (1000, 999999)
MAX_SLUG_LENGTH = 100

SLUG_PATTERN = re.compile(r'[a-z0-9]+(?:-[a-z0-9]+)*')

def validate_slug(url: str) -> str:
    """Check a desired slug and return it unchanged.

    Slugs are stored exactly as submitted, so they must already be
    lowercase letters and digits separated by single hyphens.

    Raises:
        InvalidStatsError: If the slug does not match SLUG_PATTERN
    """
    if not url or len(url) > MAX_SLUG_LENGTH or not SLUG_PATTERN.fullmatch(url):
        raise InvalidStatsError(
            "URL must be 1-100 lowercase letters, numbers and single hyphens"
        )
    return url

async def url_exists(conn, url: str) -> bool:
    """Check whether a stats page already uses this URL."""
    return bool(await conn.fetchval(
        'SELECT EXISTS(SELECT 1 FROM "OFFChain_LootboxStats" WHERE url = $1)',
        url
    ))

async def generate_unique_url(conn, desired: str, max_attempts: int = MAX_SLUG_ATTEMPTS) -> str:
    """Find an unused slug, starting from the desired one.

    The desired slug is returned unchanged when free. Otherwise a random
    numeric suffix is appended, up to max_attempts times.

    Args:
        conn: Database connection
        desired: Validated desired slug
        max_attempts: Suffixed candidates to try after the base

    Returns:
        A slug unused at the time of the check

    Raises:
        SlugGenerationError: If every candidate was taken
    """
    if not await url_exists(conn, desired):
        return desired

    for attempt in range(1, max_attempts + 1):
        candidate = f"{desired}-{random.randint(*SLUG_SUFFIX_RANGE)}"
        if not await url_exists(conn, candidate):
            logger.debug(f"Slug {desired} taken, using {candidate} (attempt {attempt})")
            return candidate

    raise SlugGenerationError(
        f"Could not find an unused URL for {desired} after {max_attempts} attempts"
    )
