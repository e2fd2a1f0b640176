"""
ConversationStore protocol for the lead qualification engine.

Abstracts where live conversations are kept so the service can be handed an
isolated store per process or per test.
"""

import logging
from typing import Dict, List, Optional, Protocol, runtime_checkable

from .models import Conversation

logger = logging.getLogger(__name__)


@runtime_checkable
class ConversationStore(Protocol):
    """Protocol for live conversation storage."""

    async def add(self, conversation: Conversation) -> None:
        """Store a newly created conversation."""
        ...

    async def get(self, conversation_id: str) -> Optional[Conversation]:
        """Get a conversation by id."""
        ...

    async def list_all(self) -> List[Conversation]:
        """All conversations, oldest first."""
        ...


class InMemoryConversationStore:
    """Process-local conversation store."""

    def __init__(self):
        self._conversations: Dict[str, Conversation] = {}

    async def add(self, conversation: Conversation) -> None:
        self._conversations[conversation.id] = conversation
        logger.debug(f"Stored conversation {conversation.id}")

    async def get(self, conversation_id: str) -> Optional[Conversation]:
        return self._conversations.get(conversation_id)

    async def list_all(self) -> List[Conversation]:
        return sorted(self._conversations.values(), key=lambda c: c.start_time)
