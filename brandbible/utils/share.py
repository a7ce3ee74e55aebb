"""Share links that carry a mission statement in a single query parameter."""

from typing import Optional
from urllib.parse import parse_qs, quote, urlsplit, urlunsplit

MISSION_PARAM = "mission"


def build_share_url(base_url: str, mission: str) -> str:
    """
    Build a link that replays a generation for `mission`.
    
    Any query string or fragment already on `base_url` is replaced.
    """
    scheme, netloc, path, _, _ = urlsplit(base_url)
    query = f"{MISSION_PARAM}={quote(mission, safe='')}"
    return urlunsplit((scheme, netloc, path, query, ""))


def mission_from_query(query: str) -> Optional[str]:
    """Decode the mission from a query string, or None when it is absent or blank."""
    values = parse_qs(query.lstrip("?"), keep_blank_values=True).get(MISSION_PARAM)
    if not values or not values[0].strip():
        return None
    return values[0]


def mission_from_url(url: str) -> Optional[str]:
    return mission_from_query(urlsplit(url).query)
