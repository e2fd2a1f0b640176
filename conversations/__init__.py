"""
Conversations Module for the lead qualification engine.

Conversation aggregate, stores, classification ledgers, the finalization
trigger and the orchestrating service.
"""

from .models import ClassificationRecord, Conversation, ConversationStatus, Lead, Message, Sender
from .store import ConversationStore, InMemoryConversationStore
from .ledger import ClassificationLedger, InMemoryClassificationLedger
from .finalizer import Finalization, Finalizer, should_classify
from .service import ConversationService, CreatedConversation, TurnResult

__all__ = [
    "ClassificationRecord",
    "Conversation",
    "ConversationStatus",
    "Lead",
    "Message",
    "Sender",
    "ConversationStore",
    "InMemoryConversationStore",
    "ClassificationLedger",
    "InMemoryClassificationLedger",
    "Finalization",
    "Finalizer",
    "should_classify",
    "ConversationService",
    "CreatedConversation",
    "TurnResult",
]
