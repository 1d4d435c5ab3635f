"""
HTTP client for the input tools suggestion endpoint.
"""
import logging
import time
from typing import List, Optional

import httpx

from inputtools.clients.decoder import parse_suggestions_response
from inputtools.core.cache import LRUCache
from inputtools.core.errors import InputToolsError, TransportError

logger = logging.getLogger(__name__)


class InputToolsClient:
    def __init__(
        self,
        timeout_seconds: int = 5,
        cache: Optional[LRUCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout_seconds
        self.cache = cache if cache is not None else LRUCache(max_size=5000, default_ttl=600)
        self.transport = transport

    async def fetch_suggestions(self, url: str) -> List[str]:
        """
        GET `url` and decode the candidate list.
        Raises TransportError on network failures or non-200 responses and the
        decoder's errors on malformed bodies.
        """
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug("[INPUTTOOLS] event=cache_hit url=%s", url)
            return list(cached)

        start = time.perf_counter()
        logger.info("[INPUTTOOLS] event=start url=%s cache_status=miss", url)
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), transport=self.transport) as client:
            try:
                resp = await client.get(url)
            except httpx.HTTPError as e:
                logger.error("[INPUTTOOLS] event=error dependency=inputtools err=%s", e)
                raise TransportError(f"Request failed: {e}") from e
            except Exception as e:
                logger.exception("[INPUTTOOLS] event=error dependency=inputtools unexpected err=%s", e)
                raise TransportError(f"Request failed: {e}") from e

        latency_ms = (time.perf_counter() - start) * 1000
        if resp.status_code != 200:
            logger.error(
                "[INPUTTOOLS] event=error status=%s dependency=inputtools latency_ms=%.2f",
                resp.status_code,
                latency_ms,
            )
            raise TransportError(f"HTTP {resp.status_code}: {resp.reason_phrase}", status_code=resp.status_code)

        try:
            suggestions = parse_suggestions_response(resp.text)
        except InputToolsError as e:
            logger.error("[INPUTTOOLS] event=decode_error latency_ms=%.2f err=%s", latency_ms, e)
            raise
        except Exception as e:
            logger.exception("[INPUTTOOLS] event=decode_error latency_ms=%.2f err=%s", latency_ms, e)
            raise TransportError(f"Failed to read response: {e}") from e

        logger.info(
            "[INPUTTOOLS] event=ok dependency=inputtools latency_ms=%.2f outputs=%d",
            latency_ms,
            len(suggestions),
        )
        self.cache.set(url, suggestions)
        return list(suggestions)
