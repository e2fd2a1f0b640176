"""
Conversation aggregate for the lead qualification engine.

A Conversation owns its message log and accumulated metadata. It is created at
lead intake, mutated only through append_message / merge_metadata, and moves
from active to classified exactly once.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from config.industries import IndustryConfig
from dialogue.engine import Stage, stage_for
from lead_scoring.exceptions import LeadQualifierError
from lead_scoring.scoring_model import ClassificationResult


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


class ConversationStatus(str, Enum):
    ACTIVE = "active"
    CLASSIFIED = "classified"


@dataclass(frozen=True)
class Message:
    """A single transcript entry. Never mutated after append."""
    id: str
    sender: Sender
    text: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sender": self.sender.value,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Lead:
    """Lead details captured at intake."""
    name: str
    phone: str = "Not provided"
    source: str = "Direct"
    initial_message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "phone": self.phone,
            "source": self.source,
            "initial_message": self.initial_message,
        }


@dataclass
class Conversation:
    """Aggregate root for one lead conversation."""
    id: str
    owner_session_id: str
    lead: Lead
    industry: IndustryConfig
    start_time: datetime
    last_update_time: datetime
    messages: List[Message] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    status: ConversationStatus = ConversationStatus.ACTIVE
    classification: Optional[ClassificationResult] = None

    @property
    def user_messages(self) -> List[Message]:
        return [m for m in self.messages if m.sender == Sender.USER]

    @property
    def user_message_count(self) -> int:
        return len(self.user_messages)

    @property
    def stage(self) -> Stage:
        """Dialogue stage, recomputed from the message log."""
        return stage_for(self.user_message_count)

    @property
    def is_classified(self) -> bool:
        return self.status == ConversationStatus.CLASSIFIED

    def append_message(self, sender: Sender, text: str, timestamp: datetime) -> Message:
        message = Message(id=str(uuid.uuid4()), sender=sender, text=text, timestamp=timestamp)
        self.messages.append(message)
        self.last_update_time = timestamp
        return message

    def merge_metadata(self, update: Mapping[str, Any]):
        """Overwrite with every present value; absent or None values never erase known ones."""
        for key, value in update.items():
            if value is not None:
                self.metadata[key] = value

    def mark_classified(self, result: ClassificationResult, timestamp: datetime):
        if self.is_classified:
            raise LeadQualifierError(f"Conversation {self.id} is already classified")
        self.classification = result
        self.status = ConversationStatus.CLASSIFIED
        self.last_update_time = timestamp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lead": self.lead.to_dict(),
            "industry": self.industry.id,
            "messages": [m.to_dict() for m in self.messages],
            "metadata": dict(self.metadata),
            "status": self.status.value,
            "stage": self.stage.value,
            "start_time": self.start_time.isoformat(),
            "last_update_time": self.last_update_time.isoformat(),
            "classification": self.classification.to_dict() if self.classification else None,
        }


@dataclass(frozen=True)
class ClassificationRecord:
    """Write-once snapshot of a classified conversation."""
    id: str
    timestamp: datetime
    lead: Dict[str, Any]
    industry_id: str
    status: str
    confidence: float
    reasons: Tuple[str, ...]
    metadata: Dict[str, Any]
    transcript: Tuple[Dict[str, Any], ...]

    @classmethod
    def from_conversation(cls, conversation: Conversation, timestamp: datetime) -> "ClassificationRecord":
        if conversation.classification is None:
            raise LeadQualifierError(f"Conversation {conversation.id} has no classification")
        result = conversation.classification
        return cls(
            id=conversation.id,
            timestamp=timestamp,
            lead=conversation.lead.to_dict(),
            industry_id=conversation.industry.id,
            status=result.status.value,
            confidence=result.confidence,
            reasons=result.reasons,
            metadata=dict(conversation.metadata),
            transcript=tuple(
                {"sender": m.sender.value, "text": m.text, "timestamp": m.timestamp.isoformat()}
                for m in conversation.messages
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "lead": dict(self.lead),
            "industry_id": self.industry_id,
            "status": self.status,
            "confidence": self.confidence,
            "reasons": list(self.reasons),
            "metadata": dict(self.metadata),
            "transcript": [dict(entry) for entry in self.transcript],
        }
