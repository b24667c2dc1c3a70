"""Date and slot carried in the page query string so a link restores them."""
from typing import Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlsplit

DATE_PARAM = "date"
TIME_PARAM = "time"


def build_query(day: Optional[str], slot: Optional[str]) -> str:
    params = {}
    if day:
        params[DATE_PARAM] = day
    if slot:
        params[TIME_PARAM] = slot
    return urlencode(params)


def parse_query(query: str) -> Tuple[Optional[str], Optional[str]]:
    """Accepts a bare query string, one with a leading '?', or a full URL."""
    if not query:
        return None, None
    if "://" in query:
        query = urlsplit(query).query
    params = parse_qs(query.lstrip("?"))
    day = params.get(DATE_PARAM, [None])[0]
    slot = params.get(TIME_PARAM, [None])[0]
    return day, slot
