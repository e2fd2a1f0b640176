"""
Conversation orchestration for the lead qualification engine.

One user turn: append the message, merge extracted metadata, produce the next
bot reply, then check whether the conversation is ready to classify. Turns on
the same conversation are serialized by a per-conversation lock; different
conversations run concurrently.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from config.industries import IndustryConfig, IndustryRegistry
from dialogue.engine import DialoguePolicy
from lead_scoring.clock import Clock, utc_now
from lead_scoring.entity_extractor import MetadataExtractor
from lead_scoring.exceptions import (
    AuthorizationError,
    ExtractionFailure,
    NotFoundError,
    ValidationError,
)
from lead_scoring.scoring_model import ClassificationResult

from .finalizer import Finalizer
from .models import Conversation, Lead, Sender
from .store import ConversationStore

logger = logging.getLogger(__name__)

PERSISTENCE_WARNING = "Classification could not be saved"


@dataclass(frozen=True)
class TurnResult:
    """Outcome of one user turn."""
    bot_response: str
    classification: Optional[ClassificationResult] = None
    warnings: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bot_response": self.bot_response,
            "classification": self.classification.to_dict() if self.classification else None,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class CreatedConversation:
    """Outcome of lead intake."""
    conversation_id: str
    greeting: str
    initial_turn: Optional[TurnResult] = None


class ConversationService:
    """
    Entry point for the transport layer.

    All collaborators are injected so tests can run against isolated stores,
    ledgers and clocks.
    """

    def __init__(
        self,
        registry: IndustryRegistry,
        store: ConversationStore,
        extractor: MetadataExtractor,
        policy: DialoguePolicy,
        finalizer: Finalizer,
        clock: Clock = utc_now,
        default_industry: str = "real_estate",
    ):
        self.registry = registry
        self.store = store
        self.extractor = extractor
        self.policy = policy
        self.finalizer = finalizer
        self.clock = clock
        self.default_industry = default_industry
        self._locks: Dict[str, asyncio.Lock] = {}

    async def create_conversation(self, session_id: str, lead_info: Mapping[str, Any]) -> CreatedConversation:
        """
        Start a conversation for a new lead.

        Args:
            session_id: Session that will own the conversation
            lead_info: ``name`` (required), ``phone``, ``source``,
                ``initial_message`` and ``industry``

        Returns:
            CreatedConversation with the greeting and, when the lead sent an
            initial message, the reply to it

        Raises:
            ValidationError: session id or lead name missing
            NotFoundError: unknown industry
        """
        if not session_id:
            raise ValidationError("Session id is required")

        name = (lead_info.get("name") or "").strip()
        if not name:
            raise ValidationError("Lead name is required")

        industry = self._get_industry(lead_info.get("industry") or self.default_industry)

        lead = Lead(
            name=name,
            phone=lead_info.get("phone") or "Not provided",
            source=lead_info.get("source") or "Direct",
            initial_message=(lead_info.get("initial_message") or "").strip(),
        )

        now = self.clock()
        conversation = Conversation(
            id=str(uuid.uuid4()),
            owner_session_id=session_id,
            lead=lead,
            industry=industry,
            start_time=now,
            last_update_time=now,
        )
        greeting = self.policy.greeting(industry, lead.name)
        conversation.append_message(Sender.BOT, greeting, now)
        await self.store.add(conversation)

        logger.info(f"Conversation {conversation.id} created for lead {lead.name} ({industry.id})")

        initial_turn = None
        if lead.initial_message:
            initial_turn = await self.submit_user_message(conversation.id, session_id, lead.initial_message)

        return CreatedConversation(
            conversation_id=conversation.id,
            greeting=greeting,
            initial_turn=initial_turn,
        )

    async def submit_user_message(self, conversation_id: str, session_id: str, text: str) -> TurnResult:
        """
        Process one user message.

        Args:
            conversation_id: Target conversation
            session_id: Calling session; must own the conversation
            text: User message

        Returns:
            TurnResult with the bot reply and, on the turn that finalizes the
            conversation, its classification

        Raises:
            ValidationError: conversation id or text missing
            NotFoundError: unknown conversation
            AuthorizationError: caller does not own the conversation
        """
        if not conversation_id:
            raise ValidationError("Conversation id is required")
        if not text or not text.strip():
            raise ValidationError("Message text is required")

        conversation = await self._get(conversation_id)
        if conversation.owner_session_id != session_id:
            logger.warning(f"Session {session_id} rejected for conversation {conversation_id}")
            raise AuthorizationError(f"Session does not own conversation {conversation_id}")

        text = text.strip()
        async with self._lock_for(conversation_id):
            conversation.append_message(Sender.USER, text, self.clock())
            reply = self._process_turn(conversation, text)
            conversation.append_message(Sender.BOT, reply, self.clock())

            finalization = await self.finalizer.finalize_if_ready(conversation)

        if finalization is None:
            return TurnResult(bot_response=reply)

        warnings = () if finalization.persisted else (PERSISTENCE_WARNING,)
        return TurnResult(bot_response=reply, classification=finalization.result, warnings=warnings)

    async def get_conversation(self, conversation_id: str) -> Conversation:
        if not conversation_id:
            raise ValidationError("Conversation id is required")
        return await self._get(conversation_id)

    async def list_conversations(self) -> List[Conversation]:
        return await self.store.list_all()

    def _process_turn(self, conversation: Conversation, text: str) -> str:
        history = [m.text for m in conversation.user_messages]
        try:
            update = self.extractor.extract(text, conversation.industry, history)
        except ExtractionFailure as e:
            logger.error(f"Extraction failed for conversation {conversation.id}: {e}")
            return self.policy.fallback_reply(conversation.industry)

        conversation.merge_metadata(update.to_dict())
        return self.policy.next_reply(
            conversation.industry,
            conversation.metadata,
            conversation.user_message_count,
            conversation.lead.name,
        )

    async def _get(self, conversation_id: str) -> Conversation:
        conversation = await self.store.get(conversation_id)
        if conversation is None:
            raise NotFoundError(f"Conversation not found: {conversation_id}")
        return conversation

    def _get_industry(self, industry_id: str) -> IndustryConfig:
        industry = self.registry.get(industry_id)
        if industry is None:
            raise NotFoundError(f"Industry not found: {industry_id}")
        return industry

    def _lock_for(self, conversation_id: str) -> asyncio.Lock:
        # Kept for the conversation's lifetime; turns after classification still serialize on it
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = self._locks[conversation_id] = asyncio.Lock()
        return lock
