"""Document annotation endpoints."""

import logging
import uuid

from fastapi import APIRouter, HTTPException, status

from starcounter.config import settings
from starcounter.models.stars import AnnotatedDocument, HtmlDocument, LinkResult, PageInfo
from starcounter.services.page_session import PageSession

router = APIRouter(prefix="/api", tags=["annotate"])

logger = logging.getLogger(__name__)

# Live page sessions by id, oldest first
_sessions: dict[str, PageSession] = {}


def _evict_oldest_sessions() -> None:
    """Close the oldest pages so a new one fits under the session cap."""
    while _sessions and len(_sessions) >= settings.max_page_sessions:
        page_id = next(iter(_sessions))
        _sessions.pop(page_id).close()
        logger.info(f"Evicted page session {page_id}")


def _get_session(page_id: str) -> PageSession:
    session = _sessions.get(page_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Page {page_id} not found")
    return session


def _page_info(page_id: str, session: PageSession, stars: dict | None = None) -> PageInfo:
    return PageInfo(
        id=page_id,
        html=session.render(),
        links=[LinkResult(**state) for state in session.link_states()],
        stars=stars or {},
        rescan_pending=session.debouncer.pending,
    )


@router.post("/annotate", response_model=AnnotatedDocument)
async def annotate(document: HtmlDocument):
    """Annotate every repository link in a document in a single pass."""
    session = PageSession(document.html)
    stars = await session.process_links()
    return AnnotatedDocument(
        html=session.render(),
        links=[LinkResult(**state) for state in session.link_states()],
        stars=stars,
    )


@router.post("/pages", response_model=PageInfo, status_code=status.HTTP_201_CREATED)
async def create_page(document: HtmlDocument):
    """Open a live page and annotate its current links."""
    page_id = uuid.uuid4().hex
    session = PageSession(document.html)
    _evict_oldest_sessions()
    _sessions[page_id] = session
    stars = await session.process_links()
    return _page_info(page_id, session, stars)


@router.get("/pages/{page_id}", response_model=PageInfo)
async def get_page(page_id: str):
    """Get the current state of a live page."""
    return _page_info(page_id, _get_session(page_id))


@router.post(
    "/pages/{page_id}/mutations",
    response_model=PageInfo,
    status_code=status.HTTP_202_ACCEPTED,
)
async def mutate_page(page_id: str, fragment: HtmlDocument):
    """Append markup to a live page; new links are picked up after a quiet period."""
    session = _get_session(page_id)
    session.mutate(fragment.html)
    return _page_info(page_id, session)


@router.delete("/pages/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_page(page_id: str):
    """Close a live page."""
    session = _get_session(page_id)
    session.close()
    del _sessions[page_id]
