import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from shared.app_logging.logger import get_logger
from shared.config.settings import NewsRouterSettings

logger = get_logger("news_router.gate")


@dataclass(frozen=True)
class IngestionRequest:
    country: str
    target_count: int
    bypass_cache: bool = False
    query: Optional[str] = None
    page: int = 1

    @property
    def cache_key(self) -> str:
        key = f"news:{self.country}:{self.target_count}:{(self.query or 'default').lower()}"
        return key if self.page == 1 else f"{key}:p{self.page}"


def parse_body(raw: bytes) -> Dict[str, Any]:
    """The body is optional; anything that is not a JSON object counts as empty."""
    if not raw or not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (UnicodeDecodeError, ValueError):
        logger.debug("Ignoring request body that is not valid JSON")
        return {}
    return body if isinstance(body, dict) else {}


def parse_country(query_params: Mapping[str, str], headers: Mapping[str, str], default: str = "us") -> str:
    country = (query_params.get("country") or headers.get("x-country") or "").strip().lower()
    if len(country) == 2 and country.isascii() and country.isalpha():
        return country
    return default


def parse_limit(value: Optional[str], default: int, maximum: int) -> int:
    try:
        limit = int(value) if value is not None else default
    except ValueError:
        limit = default
    return min(max(limit, 1), maximum)


def parse_page(value: Optional[str]) -> int:
    """Provider page to read; `local_cursor` and `page` are both accepted, anything invalid is page 1."""
    try:
        return max(int(value), 1) if value is not None else 1
    except ValueError:
        return 1


def parse_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    query_params: Mapping[str, str],
    settings: NewsRouterSettings,
) -> IngestionRequest:
    body = parse_body(raw_body)

    bypass = bool(body.get("refresh") or body.get("bypass_cache") or body.get("triggered_at"))
    if (headers.get("x-bypass-cache") or "").strip().lower() == "true":
        bypass = True

    query = body.get("query") if isinstance(body.get("query"), str) else None
    query = (query or query_params.get("q") or "").strip() or None
    if query:
        # searches are always served fresh
        bypass = True

    return IngestionRequest(
        country=parse_country(query_params, headers, settings.default_country),
        target_count=parse_limit(query_params.get("limit"), settings.target_count, settings.max_target_count),
        bypass_cache=bypass,
        query=query,
        page=parse_page(query_params.get("local_cursor") or query_params.get("page")),
    )
