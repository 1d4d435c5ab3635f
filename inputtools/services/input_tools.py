import logging
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from inputtools.adapters.opencc import ChineseConverter
from inputtools.clients.input_tools_client import InputToolsClient
from inputtools.clients.locator import QueryUrlBuilder
from inputtools.core.cache import FIFOCache, LRUCache
from inputtools.core.config import Settings, settings
from inputtools.core.pagination import Page, paginate
from inputtools.core.segmenter import segment
from inputtools.services.session import SUGGESTIONS_PER_PAGE, Candidate, InputSession

COPY_MODES = ("copy", "copyPaste")


@dataclass
class SuggestResult:
    retained: str
    query: str
    page: Page
    candidates: List[Candidate] = field(default_factory=list)


class InputToolsService:
    """
    Owns the locator builder, the provider client and the live input sessions.
    """

    def __init__(self, config: Optional[Settings] = None):
        config = config or settings
        self.settings = config
        self.builder = QueryUrlBuilder(
            base_url=config.INPUT_TOOLS_BASE_URL,
            itc=config.INPUT_TOOLS_ITC,
            num=config.INPUT_TOOLS_NUM,
            callback=config.INPUT_TOOLS_CALLBACK,
            cache_size=config.LOCATOR_CACHE_MAX_SIZE,
        )
        self.response_cache = LRUCache(
            max_size=config.RESPONSE_CACHE_MAX_SIZE, default_ttl=config.RESPONSE_CACHE_TTL_SECONDS
        )
        self.client = InputToolsClient(timeout_seconds=config.INPUT_TOOLS_TIMEOUT_SECONDS, cache=self.response_cache)
        self.converter = ChineseConverter() if config.SIMPLIFIED_CHINESE else None

        self.copy_mode = config.COPY_MODE
        if self.copy_mode not in COPY_MODES:
            logging.warning("[SERVICE] unknown copy_mode=%s, using copy", self.copy_mode)
            self.copy_mode = "copy"

        self.sessions = FIFOCache(max_size=config.MAX_SESSIONS)

    async def fetch(self, url: str) -> List[str]:
        return await self.client.fetch_suggestions(url)

    async def suggest(self, text: str, page: int = 0, request_id: str = "n/a") -> SuggestResult:
        parts = segment(text)
        if not parts.query.strip():
            logging.info("[SERVICE] request_id=%s empty_query", request_id)
            return SuggestResult(parts.retained, parts.query, paginate(0, SUGGESTIONS_PER_PAGE, 0))

        url = self.builder.build(parts.query, parts.retained)
        suggestions = await self.fetch(url)
        current = paginate(len(suggestions), SUGGESTIONS_PER_PAGE, max(0, page))
        candidates = [
            Candidate(text=s, position=i + 1) for i, s in enumerate(current.slice(suggestions))
        ]
        return SuggestResult(parts.retained, parts.query, current, candidates)

    def create_session(self) -> Tuple[str, InputSession]:
        if len(self.sessions) >= self.sessions.max_size:
            oldest = next(iter(self.sessions))
            logging.info("[SERVICE] evicting session_id=%s", oldest)
            self.close_session(oldest)

        session_id = uuid.uuid4().hex
        session = InputSession(
            fetcher=self.fetch,
            builder=self.builder,
            initial_debounce=self.settings.INITIAL_DEBOUNCE_MS / 1000,
            debounce=self.settings.DEBOUNCE_MS / 1000,
            converter=self.converter,
            copy_mode=self.copy_mode,
        )
        self.sessions.set(session_id, session)
        return session_id, session

    def get_session(self, session_id: str) -> Optional[InputSession]:
        return self.sessions.get(session_id)

    def close_session(self, session_id: str) -> bool:
        session = self.sessions.pop(session_id)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> None:
        for session_id in list(self.sessions):
            self.close_session(session_id)

    def stats(self) -> dict:
        return {
            "locator_cache": self.builder.cache.stats(),
            "response_cache": self.response_cache.stats(),
            "sessions": len(self.sessions),
        }
