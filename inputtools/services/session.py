"""
Input state machine for a single typing session.

The client reports the full buffer text on every change. Trailing control
digits select a candidate (1-6) or turn the page (0 next, 9 previous); any
other edit is debounced and turned into a suggestion request.
"""
import asyncio
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from inputtools.adapters.opencc import ChineseConverter
from inputtools.clients.locator import QueryUrlBuilder
from inputtools.core.errors import InputToolsError
from inputtools.core.pagination import Page, paginate
from inputtools.core.segmenter import segment

logger = logging.getLogger(__name__)

SUGGESTIONS_PER_PAGE = 6
CONTROL_KEYS = frozenset("12345690")
SELECTION_PATTERN = re.compile(r"^(.*?)([1-6]|9|0)$", re.DOTALL)

Fetcher = Callable[[str], Awaitable[List[str]]]


class SessionState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    AWAITING = "awaiting"


@dataclass(frozen=True)
class Candidate:
    text: str
    position: int


@dataclass(frozen=True)
class RenderState:
    text: str
    committed_text: str
    copy_mode: str
    is_loading: bool
    error: Optional[str]
    current_page: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
    candidates: List[Candidate] = field(default_factory=list)


class InputSession:
    def __init__(
        self,
        fetcher: Fetcher,
        builder: QueryUrlBuilder,
        initial_debounce: float = 0.1,
        debounce: float = 0.2,
        converter: Optional[ChineseConverter] = None,
        copy_mode: str = "copy",
        listener: Optional[Callable[[RenderState], None]] = None,
    ):
        self.fetcher = fetcher
        self.builder = builder
        self.initial_debounce = initial_debounce
        self.debounce = debounce
        self.converter = converter
        self.copy_mode = copy_mode
        self.listener = listener

        self.text = ""
        self.has_selected = False
        self.page_index = 0
        self.suggestions: List[str] = []
        self.error: Optional[str] = None
        self.locator = ""

        self._debounced_text = ""
        self._debounce_task: Optional[asyncio.Task] = None
        self._fetch_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> SessionState:
        if self._debounce_task is not None and not self._debounce_task.done():
            return SessionState.PENDING
        if self._fetch_task is not None and not self._fetch_task.done():
            return SessionState.AWAITING
        return SessionState.IDLE

    @property
    def page(self) -> Page:
        return paginate(len(self.suggestions), SUGGESTIONS_PER_PAGE, self.page_index)

    def current_candidates(self) -> List[Candidate]:
        if self.error:
            return []
        return [
            Candidate(text=text, position=i + 1)
            for i, text in enumerate(self.page.slice(self.suggestions))
        ]

    def committed_text(self) -> str:
        if self.converter is None:
            return self.text
        return self.converter.convert(self.text)

    def render(self) -> RenderState:
        page = self.page
        return RenderState(
            text=self.text,
            committed_text=self.committed_text(),
            copy_mode=self.copy_mode,
            is_loading=self._fetch_task is not None and not self._fetch_task.done(),
            error=self.error,
            current_page=page.current_page,
            total_pages=page.total_pages,
            has_next_page=page.has_next_page,
            has_previous_page=page.has_previous_page,
            candidates=self.current_candidates(),
        )

    def _emit(self) -> RenderState:
        rendered = self.render()
        if self.listener is not None:
            self.listener(rendered)
        return rendered

    def on_text_change(self, text: str) -> RenderState:
        """Handle the full buffer text reported after a keystroke."""
        if not text.strip():
            self.has_selected = False

        if not self._handle_control(text):
            self._set_text(segment(text).joined)
        return self._emit()

    def _handle_control(self, text: str) -> bool:
        if not text or text[-1] not in CONTROL_KEYS:
            return False
        match = SELECTION_PATTERN.match(text)
        if not match:
            return False

        base_text = match.group(1)
        num = int(match.group(2))

        if 1 <= num <= 6:
            return self._select(num)

        page = self.page
        if num == 0 and page.has_next_page:
            self.page_index = page.current_page + 1
            self._set_text(segment(base_text).joined)
            return True
        if num == 9 and page.has_previous_page:
            self.page_index = page.current_page - 1
            self._set_text(segment(base_text).joined)
            return True
        return False

    def _select(self, position: int) -> bool:
        candidates = self.current_candidates()
        if position < 1 or position > len(candidates):
            return False
        chosen = candidates[position - 1]

        # Retained text comes from the buffer before the selecting keystroke
        retained = segment(self.text).retained
        self.has_selected = True
        self._cancel_fetch()
        self.suggestions = []
        self.page_index = 0
        self.error = None
        logger.info("[SESSION] event=select position=%d candidate=%s", position, chosen.text)
        self._set_text(retained + chosen.text)
        return True

    def select(self, position: int) -> Optional[RenderState]:
        """Select candidate `position` (1-based) of the current page; None if absent."""
        if not self._select(position):
            return None
        return self._emit()

    def next_page(self) -> RenderState:
        page = self.page
        if page.has_next_page:
            self.page_index = page.current_page + 1
        return self._emit()

    def previous_page(self) -> RenderState:
        page = self.page
        if page.has_previous_page:
            self.page_index = page.current_page - 1
        return self._emit()

    def _set_text(self, text: str) -> None:
        if text == self.text:
            return
        self.text = text
        self._schedule()

    def _schedule(self) -> None:
        if self._debounce_task is not None:
            self._debounce_task.cancel()
        delay = self.debounce if self.has_selected else self.initial_debounce
        self._debounce_task = asyncio.get_running_loop().create_task(self._debounce(delay))

    async def _debounce(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._debounce_task = None
        self._flush()

    def _flush(self) -> None:
        text = self.text
        if text == self._debounced_text:
            self._emit()
            return
        self._debounced_text = text
        self.page_index = 0

        locator = self._locator_for(text)
        if not locator:
            self._cancel_fetch()
            self.locator = ""
            self.suggestions = []
            self.error = None
            self._emit()
            return
        self._dispatch(locator)

    def _locator_for(self, text: str) -> str:
        if not text.strip():
            return ""
        parts = segment(text)
        if not parts.query.strip():
            return ""
        return self.builder.build(parts.query, parts.retained)

    def _dispatch(self, locator: str) -> None:
        self._cancel_fetch()
        self.locator = locator
        logger.debug("[SESSION] event=dispatch url=%s", locator)
        self._fetch_task = asyncio.get_running_loop().create_task(self._fetch(locator))
        self._emit()

    async def _fetch(self, locator: str) -> None:
        try:
            suggestions = await self.fetcher(locator)
        except InputToolsError as e:
            if locator != self.locator:
                logger.debug("[SESSION] event=stale_error url=%s", locator)
                return
            logger.warning("[SESSION] event=fetch_error url=%s error=%s", locator, e)
            self.error = str(e)
        else:
            if locator != self.locator:
                logger.debug("[SESSION] event=stale_response url=%s", locator)
                return
            self.suggestions = list(suggestions)
            self.error = None
            self.page_index = self.page.current_page
        self._fetch_task = None
        self._emit()

    def _cancel_fetch(self) -> None:
        if self._fetch_task is not None:
            self._fetch_task.cancel()
            self._fetch_task = None

    async def settle(self) -> RenderState:
        """Wait for any pending debounce and in-flight request to finish."""
        while True:
            pending = [
                task
                for task in (self._debounce_task, self._fetch_task)
                if task is not None and not task.done()
            ]
            if not pending:
                return self.render()
            await asyncio.wait(pending)

    def close(self) -> None:
        if self._debounce_task is not None:
            self._debounce_task.cancel()
            self._debounce_task = None
        self._cancel_fetch()
