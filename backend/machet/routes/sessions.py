"""Chat session endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from machet.auth import verify_api_key
from machet.errors import ConfigError
from machet.models import DeletedOut, MessageReply, MessageRequest, SessionDetail, SessionOut
from machet.sessions import Session, SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", dependencies=[Depends(verify_api_key)])


def _manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def _get_session(request: Request, session_id: str) -> Session:
    session = _manager(request).get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.get("", response_model=list[SessionOut])
def list_sessions(request: Request):
    return [s.to_dict() for s in _manager(request).all()]


@router.post("", response_model=SessionOut)
def create_session(request: Request):
    try:
        session = _manager(request).create()
    except ConfigError as e:
        logger.error("Cannot create session: %s", e)
        raise HTTPException(status_code=503, detail=f"Model provider unavailable: {e}")
    return session.to_dict()


@router.get("/{session_id}", response_model=SessionDetail)
def get_session(request: Request, session_id: str):
    session = _get_session(request, session_id)
    return {**session.to_dict(), "messages": session.controller.to_messages()}


@router.post("/{session_id}/messages", response_model=MessageReply)
async def post_message(request: Request, session_id: str, req: MessageRequest):
    session = _get_session(request, session_id)
    async with session.lock:
        if session.controller.state.terminal:
            logger.info("Rejected message for %s session %s",
                        session.controller.state.name, session.id)
            raise HTTPException(
                status_code=409,
                detail=f"Session is {session.controller.state.value}",
            )
        replies = await session.controller.submit(req.content)
    return {
        "session_id": session.id,
        "state": session.controller.state.value,
        "replies": [t.to_message() for t in replies],
        "error": session.controller.last_error,
    }


@router.delete("/{session_id}", response_model=DeletedOut)
def delete_session(request: Request, session_id: str):
    if not _manager(request).remove(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "deleted", "id": session_id}
