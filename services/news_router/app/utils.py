import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_WHITESPACE = re.compile(r"\s+")


def _to_naive_utc(dt: datetime) -> Optional[datetime]:
    if dt.tzinfo is None:
        return dt
    try:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    except (OverflowError, ValueError):
        # e.g. "0001-01-01T00:00:00+05:00" lands before year 1 in UTC
        return None


def parse_timestamp(ts_raw: Any) -> Optional[datetime]:
    """
    Try ISO8601 first, then fall back to RFC-style dates.
    Returns a naive UTC datetime, or None if parsing fails.
    """
    if not isinstance(ts_raw, str) or not ts_raw.strip():
        return None
    ts_raw = ts_raw.strip()

    # ISO: "2025-07-16T20:54:01+00:00", "2025-07-16T20:54:01Z" or NewsData's "2025-07-16 20:54:01"
    try:
        dt = datetime.fromisoformat(ts_raw.replace("Z", "+00:00"))
    except ValueError:
        dt = None
    if dt is not None:
        return _to_naive_utc(dt)

    # RFC: "Wed, 16 Jul 2025 20:54:01 +0000"
    try:
        dt = parsedate_to_datetime(ts_raw)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    if dt is None:
        return None
    return _to_naive_utc(dt)


def collapse_whitespace(value: Optional[str]) -> str:
    if not value:
        return ""
    return _WHITESPACE.sub(" ", value).strip()


def truncate(value: str, max_length: int = 200) -> str:
    return value if len(value) <= max_length else f"{value[: max_length - 3]}..."


def normalize_url(value: Optional[str]) -> str:
    """Canonical form of a source URL: no fragment, no tracking params, no trailing slash, lowercased."""
    if not value:
        return ""
    trimmed = value.strip()
    parts = urlsplit(trimmed)
    if not parts.scheme or not parts.netloc:
        return trimmed.rstrip("/").lower()

    params = [
        (key, val)
        for key, val in parse_qsl(parts.query, keep_blank_values=True)
        if not key.lower().startswith("utm") and key.lower() not in ("ref", "source")
    ]
    rebuilt = urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(params), ""))
    return rebuilt.rstrip("/").lower()


def to_str_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def to_str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None
