"""Chat sessions, live code editing and version history."""

import logging

from fastapi import APIRouter, HTTPException, Request

from uigen.library.validator import validate_component_usage
from uigen.schemas.api import ChatReply, CodeUpdateRequest, CodeUpdateResponse, PromptRequest
from uigen.schemas.session import Session, Version
from uigen.sessions.chat import DEFAULT_REPLY

router = APIRouter(prefix="/sessions", tags=["sessions"])

logger = logging.getLogger(__name__)


@router.post("", response_model=Session, status_code=201)
async def create_session(request: Request):
    return await request.app.state.store.create()


@router.get("/{session_id}", response_model=Session)
async def get_session(session_id: str, request: Request):
    return await request.app.state.store.get(session_id)


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request):
    await request.app.state.store.delete(session_id)


@router.post("/{session_id}/messages", response_model=ChatReply)
async def send_message(session_id: str, req: PromptRequest, request: Request):
    """One chat turn: generate against the session's current code and record a version."""
    try:
        result, version = await request.app.state.chat.send(session_id, req.prompt)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return ChatReply(
        reply=result.explanation or DEFAULT_REPLY,
        version=version,
        code=result.code,
        plan=result.plan.model_dump(by_alias=True),
        component_usage=result.component_usage,
        validation=result.validation,
    )


@router.put("/{session_id}/code", response_model=CodeUpdateResponse)
async def update_code(session_id: str, req: CodeUpdateRequest, request: Request):
    """Live editor save; the code is validated but stored either way."""
    session = await request.app.state.store.update_code(session_id, req.code)
    return CodeUpdateResponse(
        current_code=session.current_code,
        validation=validate_component_usage(session.current_code),
    )


@router.get("/{session_id}/versions", response_model=list[Version])
async def list_versions(session_id: str, request: Request):
    return await request.app.state.store.versions(session_id)


@router.post("/{session_id}/versions/{version_id}/rollback", response_model=Version)
async def rollback(session_id: str, version_id: str, request: Request):
    version = await request.app.state.store.rollback(session_id, version_id)
    logger.info("Restored version %s in session %s", version_id, session_id)
    return version
