"""Branding chat endpoints with turn-based and streamed replies."""

import json
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from .deps import get_gateway, get_pipeline
from ..core import BrandGateway, ChatSessionController
from ..models.schemas import ChatMessage
from ..utils.config import PipelineConfig
from ..utils.logger import get_logger
from ..utils.sessions import SessionStore

logger = get_logger(__name__)

router = APIRouter()

IN_FLIGHT_DETAIL = "A reply is still in progress"
EMPTY_MESSAGE_DETAIL = "Message must not be empty"


class SessionResponse(BaseModel):
    session_id: str
    transcript: List[ChatMessage]


class MessageRequest(BaseModel):
    message: str


def _sessions(request: Request) -> SessionStore:
    return request.app.state.chat_sessions


def _get_session(request: Request, session_id: str) -> ChatSessionController:
    controller = _sessions(request).get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Chat session not found")
    return controller


def _check(controller: ChatSessionController, message: str):
    """Reject a turn up front without touching the transcript."""
    if controller.in_flight:
        raise HTTPException(status_code=409, detail=IN_FLIGHT_DETAIL)
    if not message or not message.strip():
        raise HTTPException(status_code=422, detail=EMPTY_MESSAGE_DETAIL)


def _sse(event: str, data: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


@router.post("/sessions", response_model=SessionResponse)
async def open_session(
    request: Request,
    gateway: BrandGateway = Depends(get_gateway),
    pipeline: PipelineConfig = Depends(get_pipeline),
):
    """Open a conversation seeded with the assistant greeting."""
    controller = ChatSessionController(gateway, mode=pipeline.chat_mode)
    controller.open()

    session_id = _sessions(request).add(controller)

    return SessionResponse(session_id=session_id, transcript=list(controller.transcript))


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, request: Request):
    controller = _get_session(request, session_id)
    return SessionResponse(session_id=session_id, transcript=list(controller.transcript))


@router.post("/sessions/{session_id}/messages", response_model=SessionResponse)
async def send_message(session_id: str, body: MessageRequest, request: Request):
    """Send a message and return the transcript once the reply is complete."""
    controller = _get_session(request, session_id)
    _check(controller, body.message)

    if not controller.begin_turn(body.message):
        raise HTTPException(status_code=409, detail=IN_FLIGHT_DETAIL)

    async for _ in controller.iter_reply(body.message):
        pass

    return SessionResponse(session_id=session_id, transcript=list(controller.transcript))


@router.post("/sessions/{session_id}/stream")
async def stream_message(session_id: str, body: MessageRequest, request: Request):
    """
    Send a message and stream the reply as server-sent events.

    The turn is only accepted once the body starts streaming, so a client that
    disconnects before reading leaves the session untouched.
    """
    controller = _get_session(request, session_id)
    _check(controller, body.message)

    async def events():
        if not controller.begin_turn(body.message):
            yield _sse("error", {"detail": IN_FLIGHT_DETAIL})
            return

        reply = controller.iter_reply(body.message)
        try:
            async for chunk in reply:
                yield _sse("chunk", {"text": chunk})
        finally:
            # a disconnect mid-stream must still settle the turn
            await reply.aclose()
        yield _sse("done", {"message": controller.transcript[-1].model_dump(mode="json")})

    return StreamingResponse(events(), media_type="text/event-stream")


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str, request: Request):
    if not _sessions(request).delete(session_id):
        raise HTTPException(status_code=404, detail="Chat session not found")
    logger.info("Chat session closed", extra={"session_id": session_id})
