"""ETag generation and conditional-request matching."""

import logging
from typing import Any

from ledgercache.utils.hashing import hash_value

logger = logging.getLogger(__name__)


def generate_etag(payload: Any) -> str:
    """Fingerprint a payload.

    Equal payloads (regardless of dict key order) produce equal ETags.

    Args:
        payload: JSON-serializable payload, normally
            ``CachedListResponse.fingerprint_payload()``.

    Returns:
        The quoted strong ETag, e.g. ``'"3f2a9c0d1b7e4a55"'``.
    """
    return f'"{hash_value(payload)}"'


def _opaque(tag: str) -> str:
    tag = tag.strip()
    if tag[:2].upper() == "W/":
        tag = tag[2:]
    return tag.strip()


def etag_matches(if_none_match: str | None, etag: str) -> bool:
    """Check an ``If-None-Match`` header against the current ETag.

    Uses weak comparison: ``W/"x"`` matches ``"x"``. Supports a comma
    separated list and ``*``. Unquoted or otherwise malformed values never
    match, so a broken header falls through to a full response.
    """
    if not if_none_match:
        return False

    header = if_none_match.strip()
    if header == "*":
        return True

    current = _opaque(etag)
    for candidate in header.split(","):
        tag = _opaque(candidate)
        if len(tag) < 2 or not (tag.startswith('"') and tag.endswith('"')):
            logger.debug("Ignoring malformed If-None-Match entry %r", candidate)
            continue
        if tag == current:
            return True
    return False
