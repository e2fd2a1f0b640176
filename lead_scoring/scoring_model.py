"""
Lead Classification Model for the lead qualification engine.

Rule-based Hot/Cold/Invalid classification of a finished conversation:

1. Invalid short-circuit: gibberish, test input, or a lead that never engaged.
2. Hot and Cold scores: each is the share of applicable signals that hold.
   A signal applies when the field it looks at is known; "missing" signals
   always apply, and the engagement signal needs more than two user messages.

Hot wins only when it beats Cold AND clears HOT_THRESHOLD. Everything else,
ties included, is Cold.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from config.industries import IndustryConfig, REAL_ESTATE, SOFTWARE

logger = logging.getLogger(__name__)


class LeadStatus(Enum):
    """Final lead classification."""
    HOT = "Hot"
    COLD = "Cold"
    INVALID = "Invalid"


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one conversation. Never changes once produced."""
    status: LeadStatus
    confidence: float
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "confidence": self.confidence,
            "reasons": list(self.reasons),
        }


def _fmt(value: Any) -> str:
    return f"{value:g}" if isinstance(value, float) else str(value)


@dataclass(frozen=True)
class ScoringInput:
    metadata: Mapping[str, Any]
    user_texts: Tuple[str, ...]

    def known(self, key: str) -> bool:
        return self.metadata.get(key) is not None

    def get(self, key: str) -> Any:
        return self.metadata.get(key)


@dataclass(frozen=True)
class Signal:
    """One boolean condition contributing to the Hot or Cold score."""
    name: str
    applies: Callable[[ScoringInput], bool]
    holds: Callable[[ScoringInput], bool]
    reason: Callable[[ScoringInput], str]


def _always(s: ScoringInput) -> bool:
    return True


def _known(key: str) -> Callable[[ScoringInput], bool]:
    return lambda s: s.known(key)


def _mostly_short(s: ScoringInput) -> bool:
    short = sum(1 for text in s.user_texts if len(text.split()) < 4)
    return short / len(s.user_texts) > 0.7


REAL_ESTATE_HOT_SIGNALS: List[Signal] = [
    Signal(
        "budget",
        _known("budget"),
        lambda s: s.get("budget") > 0,
        lambda s: f"Clear budget: {_fmt(s.get('budget'))}L",
    ),
    Signal(
        "location",
        _known("location"),
        lambda s: len(s.get("location")) > 3 and s.get("location").lower() != "not sure",
        lambda s: f"Specific location: {s.get('location')}",
    ),
    Signal(
        "timeline",
        _known("timeline"),
        lambda s: s.get("timeline") <= 6,
        lambda s: f"Urgent timeline: {s.get('timeline')} months",
    ),
    Signal(
        "purpose",
        _known("purpose"),
        lambda s: s.get("purpose") in ("personal use", "investment"),
        lambda s: f"Clear purpose: {s.get('purpose')}",
    ),
    Signal(
        "property_type",
        _known("propertyType"),
        lambda s: bool(s.get("propertyType")),
        lambda s: f"Specific property type: {s.get('propertyType')}",
    ),
]

SOFTWARE_HOT_SIGNALS: List[Signal] = [
    Signal(
        "budget",
        _known("budget"),
        lambda s: s.get("budget") > 0,
        lambda s: "Has budget",
    ),
    Signal(
        "timeline",
        _known("timeline"),
        lambda s: s.get("timeline") <= 3,
        lambda s: f"Short implementation timeline: {s.get('timeline')} months",
    ),
    Signal(
        "decision_maker",
        _known("decisionMaker"),
        lambda s: s.get("decisionMaker") is True,
        lambda s: "Is a decision maker",
    ),
    Signal(
        "company_size",
        _known("companySize"),
        lambda s: s.get("companySize") > 50,
        lambda s: f"Good company size: {s.get('companySize')} employees",
    ),
]

GENERIC_HOT_SIGNALS: List[Signal] = [
    Signal(
        "buying_intent",
        _known("intent"),
        lambda s: s.get("intent") in ("buy", "purchase"),
        lambda s: "Clear buying intent",
    ),
]

COLD_SIGNALS: List[Signal] = [
    Signal(
        "no_budget",
        _always,
        lambda s: s.get("budget") is None or s.get("budget") <= 0,
        lambda s: "No clear budget provided",
    ),
    Signal(
        "no_location",
        _always,
        lambda s: s.get("location") is None or s.get("location").lower() in ("not sure", "anywhere"),
        lambda s: "No specific location preference",
    ),
    Signal(
        "browsing",
        _known("intent"),
        lambda s: s.get("intent") in ("browsing", "just looking"),
        lambda s: "Just browsing, no clear intent",
    ),
    Signal(
        "distant_timeline",
        _known("timeline"),
        lambda s: s.get("timeline") > 12,
        lambda s: f"Distant timeline: {s.get('timeline')} months",
    ),
    Signal(
        "low_engagement",
        lambda s: len(s.user_texts) > 2,
        _mostly_short,
        lambda s: "Mostly short, low-engagement responses",
    ),
]

INDUSTRY_HOT_SIGNALS: Dict[str, List[Signal]] = {
    REAL_ESTATE: REAL_ESTATE_HOT_SIGNALS,
    SOFTWARE: SOFTWARE_HOT_SIGNALS,
}


class LeadClassifier:
    """
    Classifies a conversation into Hot, Cold or Invalid.

    Pure: the result depends only on the messages, the metadata and the industry.
    """

    HOT_THRESHOLD = 0.6
    INVALID_CONFIDENCE = 0.9

    GIBBERISH_LETTERS = re.compile(r'^[a-z]{1,3}$')
    DIGITS_ONLY = re.compile(r'^\d+$')
    TEST_TOKENS = ("test", "asdf", "qwerty", "123")
    # Short but meaningful replies
    COMMON_SHORT_REPLIES = {"hi", "hey", "yes", "no", "ok"}

    def classify(
        self,
        messages: Sequence[Any],
        metadata: Mapping[str, Any],
        industry: IndustryConfig,
    ) -> ClassificationResult:
        """
        Classify a conversation.

        Args:
            messages: Full transcript, items with ``sender`` and ``text``
            metadata: Accumulated lead metadata
            industry: Conversation industry (selects the Hot signals)

        Returns:
            ClassificationResult
        """
        user_texts = tuple(m.text for m in messages if m.sender == "user")

        invalid_reasons = self._invalid_reasons(user_texts, len(messages))
        if invalid_reasons:
            logger.info(f"Conversation classified Invalid: {invalid_reasons}")
            return ClassificationResult(
                status=LeadStatus.INVALID,
                confidence=self.INVALID_CONFIDENCE,
                reasons=tuple(invalid_reasons),
            )

        scoring = ScoringInput(metadata=dict(metadata), user_texts=user_texts)
        hot_signals = INDUSTRY_HOT_SIGNALS.get(industry.id, []) + GENERIC_HOT_SIGNALS

        hot_score, hot_reasons = self._score(hot_signals, scoring)
        cold_score, cold_reasons = self._score(COLD_SIGNALS, scoring)

        if hot_score > cold_score and hot_score > self.HOT_THRESHOLD:
            result = ClassificationResult(LeadStatus.HOT, round(hot_score, 2), tuple(hot_reasons))
        else:
            result = ClassificationResult(LeadStatus.COLD, round(cold_score, 2), tuple(cold_reasons))

        logger.info(
            f"Conversation classified {result.status.value} "
            f"(hot={hot_score:.2f}, cold={cold_score:.2f}, industry={industry.id})"
        )
        return result

    def is_gibberish(self, text: str) -> bool:
        stripped = text.strip().lower()
        if stripped in self.COMMON_SHORT_REPLIES:
            return False
        return (
            len(stripped) < 2
            or bool(self.DIGITS_ONLY.match(stripped))
            or bool(self.GIBBERISH_LETTERS.match(stripped))
            or stripped.startswith(self.TEST_TOKENS)
        )

    def _invalid_reasons(self, user_texts: Tuple[str, ...], total_messages: int) -> List[str]:
        reasons = []

        if any(self.is_gibberish(text) for text in user_texts):
            reasons.append("Contains gibberish or test messages")

        if len(user_texts) == 1 and total_messages > 4:
            reasons.append("Unresponsive to questions")

        if len(user_texts) >= 2 and all(
            len(text.strip()) < 5 or self.DIGITS_ONLY.match(text.strip())
            for text in user_texts
        ):
            reasons.append("Consistently providing non-meaningful responses")

        return reasons

    @staticmethod
    def _score(signals: Sequence[Signal], scoring: ScoringInput) -> Tuple[float, List[str]]:
        applicable = [signal for signal in signals if signal.applies(scoring)]
        if not applicable:
            return 0.0, []

        reasons = [signal.reason(scoring) for signal in applicable if signal.holds(scoring)]
        return len(reasons) / len(applicable), reasons
