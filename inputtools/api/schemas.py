from pydantic import BaseModel, Field
from typing import List, Optional

from inputtools.core.config import settings


class InputRequest(BaseModel):
    text: str = Field(..., max_length=settings.MAX_TEXT_LEN)
    wait: bool = False


class CandidateOut(BaseModel):
    position: int = Field(..., ge=1, le=6, description="Key that selects this candidate")
    text: str


class SessionView(BaseModel):
    text: str
    committed_text: str
    copy_mode: str
    is_loading: bool
    error: Optional[str] = None
    current_page: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
    candidates: List[CandidateOut]


class SessionResponse(BaseModel):
    session_id: str
    state: SessionView


class CommitResponse(BaseModel):
    text: str
    copy_mode: str


class SuggestResponse(BaseModel):
    success: bool = True
    retained: str
    query: str
    current_page: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
    candidates: List[CandidateOut]
