# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Coaching router - client messages, coach messages, session end, living
document review and private coach consultation.
"""

import logging

from fastapi import APIRouter, HTTPException

from coach_partner.models import Client, Section
from coach_partner.schemas.api import (
    ClientCreate,
    CoachMessageCreate,
    ConsultationRequest,
    ConsultationResponse,
    DocumentResponse,
    MessageCreate,
    SectionEdit,
    SendResponse,
    SessionEndResponse,
    ThreadCreate,
    ThreadResponse,
)
from coach_partner.services.conversation_service import ConversationService, SendResult, ThreadNotFoundError
from coach_partner.services.llm import ModelCallError
from coach_partner.services.reconciliation import NothingToRevertError, SectionNotFoundError
from coach_partner.services.storage import InMemoryCoachingStore

logger = logging.getLogger(__name__)

router = APIRouter()

store = InMemoryCoachingStore()
conversation_service = ConversationService(store)


async def _require_client(client_id: str) -> Client:
    client = await store.get_client(client_id)
    if client is None:
        raise HTTPException(status_code=404, detail=f"Client not found: {client_id}")
    return client


def _send_response(result: SendResult) -> SendResponse:
    return SendResponse(
        message=result.message,
        ai_message=result.ai_message,
        coach_mentioned=result.coach_mentioned,
        ai_error=result.ai_error,
    )


# ---------------------------------------------------------------------------
# Clients and messages
# ---------------------------------------------------------------------------


@router.post("/clients", response_model=Client, status_code=201)
async def create_client(body: ClientCreate) -> Client:
    client = await store.save_client(Client(name=body.name))
    await store.get_or_create_client_document(client.id)
    return client


@router.get("/clients/{client_id}/document", response_model=DocumentResponse)
async def get_document(client_id: str) -> DocumentResponse:
    """Return the client's living document with its sections in order."""
    client = await _require_client(client_id)
    document = await store.get_or_create_client_document(client_id)
    sections = await store.get_document_sections(document.id)
    return DocumentResponse(client=client, document=document, sections=sections)


@router.post("/clients/{client_id}/messages", response_model=SendResponse, status_code=201)
async def send_message(client_id: str, body: MessageCreate) -> SendResponse:
    """Store a client message and reply to it.

    The message is stored even when the reply fails; the response then
    carries ``ai_error`` instead of ``ai_message``.
    """
    await _require_client(client_id)
    try:
        result = await conversation_service.send_client_message(client_id, body.content, body.thread_id)
    except ThreadNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _send_response(result)


@router.post("/clients/{client_id}/threads", response_model=ThreadResponse, status_code=201)
async def create_thread(client_id: str, body: ThreadCreate) -> ThreadResponse:
    await _require_client(client_id)
    thread, opening = await conversation_service.open_thread(client_id, body.exercise_id)
    return ThreadResponse(thread=thread, opening_message=opening)


@router.post("/coach/threads/{thread_id}/messages", response_model=SendResponse, status_code=201)
async def send_coach_message(thread_id: str, body: CoachMessageCreate) -> SendResponse:
    try:
        result = await conversation_service.send_coach_message(thread_id, body.content, body.trigger_ai)
    except ThreadNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _send_response(result)


@router.post("/clients/{client_id}/session-end", response_model=SessionEndResponse)
async def end_session(client_id: str) -> SessionEndResponse:
    await _require_client(client_id)
    try:
        result = await conversation_service.end_session(client_id)
    except ModelCallError as e:
        logger.error("Session end for client %s failed: %s", client_id, e)
        raise HTTPException(status_code=502, detail="Failed to process session end")
    return SessionEndResponse(
        updated_sections=result.updated_sections,
        checkpoint_advanced=result.checkpoint_advanced,
    )


@router.post("/clients/{client_id}/consult", response_model=ConsultationResponse)
async def consult(client_id: str, body: ConsultationRequest) -> ConsultationResponse:
    """Private coach consultation about a client."""
    await _require_client(client_id)
    try:
        reply = await conversation_service.consult(client_id, body.question, body.history)
    except ModelCallError as e:
        logger.error("Consultation for client %s failed: %s", client_id, e)
        raise HTTPException(status_code=502, detail="Failed to generate consultation response")
    return ConsultationResponse(reply=reply)


# ---------------------------------------------------------------------------
# Section review
# ---------------------------------------------------------------------------


@router.post("/sections/{section_id}/accept", response_model=Section)
async def accept_section(section_id: str) -> Section:
    try:
        return await conversation_service.documents.engine.accept(section_id)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/sections/{section_id}/revert", response_model=Section)
async def revert_section(section_id: str) -> Section:
    try:
        return await conversation_service.documents.engine.revert(section_id)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NothingToRevertError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/sections/{section_id}", response_model=Section)
async def edit_section(section_id: str, body: SectionEdit) -> Section:
    """Apply a human edit. Any pending AI proposal is discarded."""
    try:
        return await conversation_service.documents.engine.human_edit(
            section_id,
            actor=body.actor,
            title=body.title,
            content=body.content,
            is_collapsed=body.is_collapsed,
        )
    except SectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
