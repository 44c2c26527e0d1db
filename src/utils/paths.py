"""
Page Path Normalization

GSC reports pages as absolute URLs, GA4 reports them as paths. Both are
reduced to the same key before they are joined:

    https://example.com/pricing/?ref=x  ->  /pricing
    pricing/                            ->  /pricing
    /                                   ->  /
"""

from urllib.parse import urlparse


def _absolute_url_path(value: str):
    """Return the path of an absolute URL, or None if value is not one."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return None
    if parsed.scheme and parsed.netloc:
        return parsed.path
    return None


def normalize_page_path(path_or_url: str) -> str:
    """
    Canonicalize a URL or path into the key used to join GSC and GA4 rows.

    Absolute URLs keep only their path. Trailing slashes are stripped
    except for the root, and a leading slash is enforced. Never raises:
    anything that is not an absolute URL is treated as a raw path.

    Args:
        path_or_url: Absolute URL ("https://x.com/a/") or path ("/a", "a")

    Returns:
        Normalized key ("/a", or "/" for the root)
    """
    if not path_or_url:
        return "/"

    path = _absolute_url_path(path_or_url)
    if path is None:
        path = path_or_url

    # Strip every trailing slash so normalizing twice is a no-op ("a//")
    path = path.rstrip("/")
    if not path.startswith("/"):
        path = "/" + path

    return path
