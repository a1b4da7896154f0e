"""
Storage reference normalization.

Upload and download URLs handed out by the object store have come in several
shapes over time: a query-string token, a path whose last segment is the object
id, or a bare 32-character hex id. Every entry point funnels raw input through
`parse_storage_reference` so stored and compared references are always in the
hyphenated `8-4-4-4-12` form and matching is plain string equality. Case is
preserved; object store keys are case-sensitive.
"""
from __future__ import annotations

import re
from typing import Any, Optional
from urllib.parse import unquote, urlsplit

from src.core.errors import InvalidReference

CANONICAL_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_TOKEN_PARAM = re.compile(r"(?:^|[?&])token=([^&#]*)")
_HEX32_PREFIX = re.compile(r"^[0-9a-f]{32}", re.IGNORECASE)
# Hyphen positions for 8-4-4-4-12
_GROUPS = (8, 4, 4, 4, 12)


def is_canonical(value: Any) -> bool:
    """Return True when `value` is already a hyphenated reference (either case)."""
    return isinstance(value, str) and bool(CANONICAL_PATTERN.match(value))


def _hyphenate(hex32: str) -> str:
    parts = []
    start = 0
    for size in _GROUPS:
        parts.append(hex32[start : start + size])
        start += size
    return "-".join(parts)


def _extract_candidate(raw: str) -> str:
    token = _TOKEN_PARAM.search(raw)
    if token:
        return unquote(token.group(1))
    if "/" in raw:
        path = urlsplit(raw).path
        segment = path.rsplit("/", 1)[-1]
        return segment.split("?", 1)[0]
    return raw


# PUBLIC_INTERFACE
def parse_storage_reference(raw: Any) -> str:
    """
    Normalize a raw storage identifier into the canonical reference string.

    Accepted inputs:
      - URLs or fragments carrying a `token` query parameter
      - URLs or paths whose final segment is the object id
      - bare ids, hyphenated or as 32+ leading hex characters

    Raises:
        InvalidReference: when no canonical reference can be derived.
    """
    if not isinstance(raw, str):
        raise InvalidReference(raw, "Storage reference must be a string")
    value = raw.strip()
    if not value:
        raise InvalidReference(raw, "Storage reference is empty")

    candidate = _extract_candidate(value)

    if is_canonical(candidate):
        return candidate

    if len(candidate) >= 32 and _HEX32_PREFIX.match(candidate):
        return _hyphenate(candidate[:32])

    raise InvalidReference(raw)


# PUBLIC_INTERFACE
def try_parse_storage_reference(raw: Any) -> Optional[str]:
    """Like parse_storage_reference but returns None instead of raising."""
    try:
        return parse_storage_reference(raw)
    except InvalidReference:
        return None
