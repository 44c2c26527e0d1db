"""
HTTP Cache Headers

Browser-side caching for the dashboard's data endpoints. Responses carry
`Cache-Control: private, max-age=<ttl>` matching the server-side TTL and an
ETag derived from the payload, so an unchanged scoreboard can be answered
with 304 Not Modified.
"""

import hashlib
import json
import logging
from typing import Any, Dict, Optional

from fastapi import Response


logger = logging.getLogger(__name__)


def generate_etag(payload: Any, weak: bool = False) -> str:
    """
    Generate an ETag from a JSON-serializable payload.

    Args:
        payload: Response body (dicts/lists/scalars)
        weak: If True, generates a weak ETag (W/"...")

    Returns:
        ETag string with quotes
    """
    body = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    hash_value = hashlib.md5(body.encode()).hexdigest()[:16]

    if weak:
        return f'W/"{hash_value}"'
    return f'"{hash_value}"'


def parse_etag(etag: str) -> str:
    """Parse ETag value, removing quotes and weak prefix."""
    if not etag:
        return ""
    if etag.startswith("W/"):
        etag = etag[2:]
    return etag.strip('"')


def etags_match(request_etag: Optional[str], current_etag: str) -> bool:
    """Check an If-None-Match header (possibly a list or "*") against an ETag."""
    if not request_etag:
        return False

    current = parse_etag(current_etag)
    for etag in request_etag.split(","):
        etag = etag.strip()
        if etag == "*" or parse_etag(etag) == current:
            return True
    return False


def build_cache_headers(max_age: int, etag: Optional[str] = None) -> Dict[str, str]:
    """Cache-Control (and ETag) for a per-user data response."""
    if max_age > 0:
        headers = {"Cache-Control": f"private, max-age={int(max_age)}"}
    else:
        headers = {"Cache-Control": "no-store"}
    if etag:
        headers["ETag"] = etag
    return headers


def add_cache_headers(response: Response, max_age: int, etag: Optional[str] = None) -> Response:
    """Apply cache headers to a FastAPI Response."""
    for key, value in build_cache_headers(max_age, etag).items():
        response.headers[key] = value
    return response
