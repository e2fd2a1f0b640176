"""
Intent Classification for the lead qualification engine.

Rule-based detection of what the lead wants to do (buy, rent, browse, sell).
Full phrases in the latest message are checked first; if none match, single
keywords are looked up across the whole user history.
"""

import logging
import re
from enum import Enum
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class Intent(Enum):
    """Lead intent categories."""
    BUY = "buy"
    RENT = "rent"
    BROWSING = "browsing"
    SELL = "sell"


class IntentClassifier:
    """
    Classifies lead intent from messages.

    Both tables are evaluated top to bottom; the first intent with a hit wins.
    """

    # Full-phrase patterns, highest priority first
    INTENT_PHRASES: List[Tuple[Intent, List[str]]] = [
        (Intent.BUY, [
            "want to buy", "looking to buy", "interested in buying", "purchase",
        ]),
        (Intent.RENT, [
            "want to rent", "looking to rent", "interested in renting", "lease",
        ]),
        (Intent.BROWSING, [
            "just browsing", "just looking", "gathering information", "exploring options",
        ]),
        (Intent.SELL, [
            "want to sell", "looking to sell", "interested in selling",
        ]),
    ]

    # Single keyword fallback over the user history (whole words only)
    INTENT_KEYWORDS: List[Tuple[Intent, re.Pattern]] = [
        (Intent.BUY, re.compile(r"\bbuy(?:ing)?\b")),
        (Intent.RENT, re.compile(r"\brent(?:ing)?\b")),
        (Intent.BROWSING, re.compile(r"\bbrowsing\b|\blooking around\b")),
        (Intent.SELL, re.compile(r"\bsell(?:ing)?\b")),
    ]

    def classify(
        self,
        message: str,
        conversation_history: Optional[Sequence[str]] = None,
    ) -> Optional[Intent]:
        """
        Detect the intent of a lead.

        Args:
            message: Latest user message
            conversation_history: Earlier user messages, oldest first

        Returns:
            Detected Intent, or None when nothing matched
        """
        message_lower = message.lower()

        for intent, phrases in self.INTENT_PHRASES:
            if any(phrase in message_lower for phrase in phrases):
                return intent

        history = list(conversation_history or [])
        if not history or history[-1] != message:
            history.append(message)
        all_text = " ".join(history).lower()

        for intent, pattern in self.INTENT_KEYWORDS:
            if pattern.search(all_text):
                logger.debug(f"Intent {intent.value} from keyword fallback")
                return intent

        return None
