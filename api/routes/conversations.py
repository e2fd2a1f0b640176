"""
Conversation API Routes for the Lead Qualification API.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, Field

from conversations.models import Conversation
from conversations.service import TurnResult
from lead_scoring.exceptions import LeadQualifierError

from ..errors import to_http_exception
from ..services import Services, get_services

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request / Response Models ─────────────────────────────────────

class CreateConversationRequest(BaseModel):
    name: str = ""
    phone: Optional[str] = None
    source: Optional[str] = None
    initial_message: Optional[str] = Field(default=None, max_length=2000)
    industry: Optional[str] = None


class MessageRequest(BaseModel):
    text: str = Field(default="", max_length=2000)


class Classification(BaseModel):
    status: str
    confidence: float
    reasons: List[str] = []


class TurnResponse(BaseModel):
    bot_response: str
    classification: Optional[Classification] = None
    warnings: List[str] = []


class CreateConversationResponse(BaseModel):
    conversation_id: str
    greeting: str
    initial_turn: Optional[TurnResponse] = None


class MessageItem(BaseModel):
    id: str
    sender: str
    text: str
    timestamp: str


class ConversationDetail(BaseModel):
    id: str
    lead: Dict[str, Any]
    industry: str
    messages: List[MessageItem]
    metadata: Dict[str, Any]
    status: str
    stage: str
    start_time: str
    last_update_time: str
    classification: Optional[Classification] = None


class ConversationSummary(BaseModel):
    id: str
    lead_name: str
    industry: str
    status: str
    stage: str
    message_count: int
    last_update_time: str
    classification: Optional[Classification] = None


def _turn_response(turn: TurnResult) -> TurnResponse:
    return TurnResponse(**turn.to_dict())


def _summary(conversation: Conversation) -> ConversationSummary:
    return ConversationSummary(
        id=conversation.id,
        lead_name=conversation.lead.name,
        industry=conversation.industry.id,
        status=conversation.status.value,
        stage=conversation.stage.value,
        message_count=len(conversation.messages),
        last_update_time=conversation.last_update_time.isoformat(),
        classification=conversation.classification.to_dict() if conversation.classification else None,
    )


# ── Endpoints ─────────────────────────────────────────────────────

@router.post("/conversations", response_model=CreateConversationResponse, status_code=201)
async def create_conversation(
    request: CreateConversationRequest,
    x_session_id: Optional[str] = Header(default=None),
    services: Services = Depends(get_services),
):
    """Start a conversation for a new lead and return the bot greeting."""
    try:
        created = await services.conversation_service.create_conversation(
            x_session_id or "", request.model_dump()
        )
    except LeadQualifierError as e:
        raise to_http_exception(e)

    return CreateConversationResponse(
        conversation_id=created.conversation_id,
        greeting=created.greeting,
        initial_turn=_turn_response(created.initial_turn) if created.initial_turn else None,
    )


@router.post("/conversations/{conversation_id}/messages", response_model=TurnResponse)
async def submit_message(
    conversation_id: str,
    request: MessageRequest,
    x_session_id: Optional[str] = Header(default=None),
    services: Services = Depends(get_services),
):
    """Submit a user message and get the bot reply (and classification, once final)."""
    try:
        turn = await services.conversation_service.submit_user_message(
            conversation_id, x_session_id or "", request.text
        )
    except LeadQualifierError as e:
        raise to_http_exception(e)

    return _turn_response(turn)


@router.get("/conversations/{conversation_id}", response_model=ConversationDetail)
async def get_conversation(conversation_id: str, services: Services = Depends(get_services)):
    """Get a conversation with its transcript and metadata."""
    try:
        conversation = await services.conversation_service.get_conversation(conversation_id)
    except LeadQualifierError as e:
        raise to_http_exception(e)

    return ConversationDetail(**conversation.to_dict())


@router.get("/conversations", response_model=List[ConversationSummary])
async def list_conversations(services: Services = Depends(get_services)):
    """List all conversations, oldest first."""
    conversations = await services.conversation_service.list_conversations()
    return [_summary(c) for c in conversations]
