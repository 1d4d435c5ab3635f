"""
Builds request URLs for the input tools endpoint.
"""
import logging
from typing import Optional
from urllib.parse import quote

from inputtools.core.cache import FIFOCache
from inputtools.core.errors import InvalidInput

logger = logging.getLogger(__name__)

# Characters left unescaped by JavaScript's encodeURIComponent
URI_COMPONENT_SAFE = "!~*'()"


def canonical_key(query: str, retained: Optional[str] = None) -> str:
    return f"|{retained},{query}" if retained else query


class QueryUrlBuilder:
    def __init__(
        self,
        base_url: str,
        itc: str,
        num: int = 13,
        callback: str = "_callbacks____inputtools",
        cache_size: int = 100,
    ):
        self.base_url = base_url
        self.itc = itc
        self.num = num
        self.callback = callback
        self.cache = FIFOCache(max_size=cache_size)

    def build(self, query: str, retained: Optional[str] = None) -> str:
        """
        Return the request URL for `query` typed after the `retained` context.
        Raises InvalidInput for a blank query.
        """
        if not query or not query.strip():
            raise InvalidInput("Query text must not be empty")

        key = canonical_key(query, retained)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        url = (
            f"{self.base_url}?text={quote(key, safe=URI_COMPONENT_SAFE)}"
            f"&itc={self.itc}&num={self.num}&cp=0&cs=1&ie=utf-8&oe=utf-8&app=jsapi"
            f"&cb={self.callback}"
        )
        self.cache.set(key, url)
        logger.debug("[LOCATOR] built key=%r cache_size=%d", key, len(self.cache))
        return url
