import dataclasses
import logging
from fastapi import APIRouter, HTTPException, Query, Request
from inputtools.api.schemas import CommitResponse, InputRequest, SessionResponse, SessionView, SuggestResponse
from inputtools.core.config import settings
from inputtools.core.errors import InputToolsError
from inputtools.services.input_tools import InputToolsService
from inputtools.services.session import InputSession, RenderState

router = APIRouter()


def _service(request: Request) -> InputToolsService:
    return request.app.state.service


def _session(request: Request, session_id: str) -> InputSession:
    session = _service(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _response(session_id: str, rendered: RenderState) -> SessionResponse:
    return SessionResponse(session_id=session_id, state=SessionView(**dataclasses.asdict(rendered)))


@router.get("/health")
async def health(request: Request):
    stats = _service(request).stats()
    return {
        "ok": True,
        "locator_cache_size": stats["locator_cache"]["size"],
        "locator_cache_hits": stats["locator_cache"]["hits"],
        "locator_cache_misses": stats["locator_cache"]["misses"],
        "response_cache_size": stats["response_cache"]["size"],
        "response_cache_hits": stats["response_cache"]["hits"],
        "response_cache_misses": stats["response_cache"]["misses"],
        "sessions": stats["sessions"],
    }


@router.get("/suggest", response_model=SuggestResponse)
async def suggest(request: Request, q: str = Query(..., max_length=settings.MAX_TEXT_LEN), page: int = Query(0, ge=0)):
    rid = getattr(request.state, "request_id", "n/a")
    try:
        result = await _service(request).suggest(q, page, rid)
    except InputToolsError as e:
        logging.warning("[API] request_id=%s suggest_failed error=%s", rid, e)
        raise HTTPException(status_code=502, detail=str(e))
    return SuggestResponse(
        retained=result.retained,
        query=result.query,
        current_page=result.page.current_page,
        total_pages=result.page.total_pages,
        has_next_page=result.page.has_next_page,
        has_previous_page=result.page.has_previous_page,
        candidates=[dataclasses.asdict(c) for c in result.candidates],
    )


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(request: Request):
    session_id, session = _service(request).create_session()
    logging.info("[API] session_created session_id=%s", session_id)
    return _response(session_id, session.render())


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, request: Request, wait: bool = False):
    session = _session(request, session_id)
    rendered = await session.settle() if wait else session.render()
    return _response(session_id, rendered)


@router.post("/sessions/{session_id}/input", response_model=SessionResponse)
async def session_input(session_id: str, req: InputRequest, request: Request):
    session = _session(request, session_id)
    rendered = session.on_text_change(req.text)
    if req.wait:
        rendered = await session.settle()
    return _response(session_id, rendered)


@router.post("/sessions/{session_id}/select/{position}", response_model=SessionResponse)
async def session_select(session_id: str, position: int, request: Request, wait: bool = False):
    session = _session(request, session_id)
    rendered = session.select(position)
    if rendered is None:
        raise HTTPException(status_code=409, detail=f"No candidate at position {position}")
    if wait:
        rendered = await session.settle()
    return _response(session_id, rendered)


@router.post("/sessions/{session_id}/next", response_model=SessionResponse)
async def session_next(session_id: str, request: Request):
    return _response(session_id, _session(request, session_id).next_page())


@router.post("/sessions/{session_id}/previous", response_model=SessionResponse)
async def session_previous(session_id: str, request: Request):
    return _response(session_id, _session(request, session_id).previous_page())


@router.get("/sessions/{session_id}/commit", response_model=CommitResponse)
async def session_commit(session_id: str, request: Request):
    session = _session(request, session_id)
    return CommitResponse(text=session.committed_text(), copy_mode=session.copy_mode)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request):
    if not _service(request).close_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
