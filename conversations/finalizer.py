"""
Finalization trigger for lead conversations.

Decides when a conversation has enough information to classify, runs the
classifier once and writes the classification record.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from config.industries import REAL_ESTATE, SOFTWARE
from lead_scoring.clock import Clock, utc_now
from lead_scoring.exceptions import PersistenceError
from lead_scoring.scoring_model import ClassificationResult, LeadClassifier

from .ledger import ClassificationLedger
from .models import ClassificationRecord, Conversation

logger = logging.getLogger(__name__)

MIN_USER_MESSAGES = 4
GENERIC_MIN_USER_MESSAGES = 3


def should_classify(
    conversation: Conversation,
    now: datetime,
    generic_after_minutes: float = 5.0,
) -> bool:
    """
    Check whether a conversation is ready to be classified.

    Args:
        conversation: Conversation to check
        now: Current time
        generic_after_minutes: Minimum age for industries without field rules

    Returns:
        True when the industry's readiness rule holds
    """
    count = conversation.user_message_count
    if count < MIN_USER_MESSAGES:
        return False

    known = lambda key: conversation.metadata.get(key) is not None
    industry_id = conversation.industry.id

    if industry_id == REAL_ESTATE:
        return (known("location") or known("budget")) and (known("timeline") or known("propertyType"))
    if industry_id == SOFTWARE:
        return known("budget") and known("timeline")

    age = now - conversation.start_time
    return count >= GENERIC_MIN_USER_MESSAGES and age > timedelta(minutes=generic_after_minutes)


@dataclass(frozen=True)
class Finalization:
    """Result of finalizing a conversation."""
    result: ClassificationResult
    record: ClassificationRecord
    persisted: bool


class Finalizer:
    """Classifies a ready conversation exactly once."""

    def __init__(
        self,
        classifier: LeadClassifier,
        ledger: ClassificationLedger,
        clock: Clock = utc_now,
        generic_after_minutes: float = 5.0,
    ):
        self.classifier = classifier
        self.ledger = ledger
        self.clock = clock
        self.generic_after_minutes = generic_after_minutes

    async def finalize_if_ready(self, conversation: Conversation) -> Optional[Finalization]:
        """
        Classify the conversation if it is active and ready.

        Must be called with the conversation's turn lock held.

        Returns:
            Finalization, or None when the conversation is already classified
            or not ready yet
        """
        if conversation.is_classified:
            return None

        now = self.clock()
        if not should_classify(conversation, now, self.generic_after_minutes):
            return None

        result = self.classifier.classify(conversation.messages, conversation.metadata, conversation.industry)
        conversation.mark_classified(result, now)
        record = ClassificationRecord.from_conversation(conversation, now)

        try:
            await self.ledger.append(record)
            persisted = True
        except PersistenceError as e:
            # The decision stands even if the record could not be stored
            logger.warning(f"Classification for {conversation.id} not persisted: {e}")
            persisted = False

        logger.info(
            f"Conversation {conversation.id} finalized as {result.status.value} "
            f"(confidence={result.confidence})"
        )
        return Finalization(result=result, record=record, persisted=persisted)
