"""
Metadata Extraction for the lead qualification engine.

Turns the latest user message into a partial metadata update:
- Budget (normalized to lakhs)
- Timeline (normalized to months)
- Location
- Property type
- Purpose
- Intent
- Company size
- Decision authority

Every field has its own ordered rule list and the first matching rule wins.
A field with no match is left out of the update, so merging never erases a
value learned earlier in the conversation.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config.industries import IndustryConfig, REAL_ESTATE, SOFTWARE

from .clock import Clock, utc_now
from .exceptions import ExtractionFailure
from .intent_classifier import IntentClassifier

logger = logging.getLogger(__name__)

LAKH = 100_000

# Attribute name -> metadata key
FIELD_KEYS: List[Tuple[str, str]] = [
    ("budget", "budget"),
    ("timeline", "timeline"),
    ("location", "location"),
    ("property_type", "propertyType"),
    ("purpose", "purpose"),
    ("intent", "intent"),
    ("company_size", "companySize"),
    ("decision_maker", "decisionMaker"),
]

INDUSTRY_FIELDS: Dict[str, Tuple[str, ...]] = {
    REAL_ESTATE: ("location", "budget", "property_type", "timeline", "purpose", "intent"),
    SOFTWARE: ("budget", "timeline", "company_size", "decision_maker", "intent"),
}
ALL_FIELDS: Tuple[str, ...] = tuple(attr for attr, _ in FIELD_KEYS)


@dataclass
class ExtractedMetadata:
    """Partial metadata update derived from one message. None means absent."""

    budget: Optional[float] = None          # lakhs
    timeline: Optional[int] = None          # months
    location: Optional[str] = None
    property_type: Optional[str] = None
    purpose: Optional[str] = None
    intent: Optional[str] = None
    company_size: Optional[int] = None
    decision_maker: Optional[bool] = None   # None = unknown

    def is_empty(self) -> bool:
        return not self.to_dict()

    def to_dict(self) -> Dict[str, Any]:
        """Present fields only, keyed by metadata name."""
        return {
            key: getattr(self, attr)
            for attr, key in FIELD_KEYS
            if getattr(self, attr) is not None
        }


class MetadataExtractor:
    """
    Extracts lead metadata from user messages.

    Pure pattern matching; the only outside input is the clock, used to resolve
    "by the end of the year" into a month count.
    """

    # Budget
    INDIAN_BUDGET = re.compile(
        r'(\d[\d,]*(?:\.\d+)?)\s*(crores?|cr|lakhs?|lacs?|l)\b',
        re.IGNORECASE
    )
    WESTERN_BUDGET = re.compile(
        r'\$\s*(?P<dollars>\d[\d,]*(?:\.\d+)?)'
        r'|(?P<amount>\d[\d,]*(?:\.\d+)?)\s*(?:(?P<unit>thousand|million|k|m)\b|(?P<suffix>\$))',
        re.IGNORECASE
    )
    BARE_NUMBER = re.compile(r'(?<![\w.])(\d[\d,]*(?:\.\d+)?)(?!\w)')
    BUDGET_CONTEXT = ["budget", "afford", "price", "cost", "spend"]

    # Timeline
    TIMELINE_PATTERN = re.compile(
        r'(?<![\d.])(\d+(?:\.\d+)?)\s*(months?|weeks?|years?|days?)\b',
        re.IGNORECASE
    )
    IMMEDIATE_PHRASES = [
        "asap", "as soon as possible", "immediately", "right away",
        "next month", "within a month",
    ]
    FEW_MONTHS_PHRASES = ["few months", "couple of months"]
    YEAR_END_PHRASES = ["end of year", "end of the year", "by year end", "by december"]

    # Location
    LOCATION_MARKERS = re.compile(
        r'\b(?:looking in|interested in|location|area|near|around)\b',
        re.IGNORECASE
    )
    KNOWN_CITIES = [
        "navi mumbai", "new delhi", "new york", "los angeles", "san francisco",
        "mumbai", "delhi", "bangalore", "bengaluru", "pune", "hyderabad",
        "chennai", "kolkata", "ahmedabad", "jaipur", "surat", "thane",
        "noida", "gurgaon", "gurugram", "lucknow", "london", "toronto", "chicago",
    ]

    # Property types, specific configurations before generic words
    PROPERTY_TYPES: List[Tuple[str, str]] = [
        ("1bhk", "1BHK"),
        ("1 bhk", "1BHK"),
        ("one bedroom", "1BHK"),
        ("2bhk", "2BHK"),
        ("2 bhk", "2BHK"),
        ("two bedroom", "2BHK"),
        ("3bhk", "3BHK"),
        ("3 bhk", "3BHK"),
        ("three bedroom", "3BHK"),
        ("4bhk", "4BHK"),
        ("4 bhk", "4BHK"),
        ("studio", "Studio Apartment"),
        ("villa", "Villa"),
        ("bungalow", "Bungalow"),
        ("house", "House"),
        ("plot", "Plot/Land"),
        ("land", "Plot/Land"),
        ("commercial", "Commercial"),
        ("office", "Office Space"),
        ("shop", "Shop/Retail"),
        ("flat", "Apartment/Flat"),
        ("apartment", "Apartment/Flat"),
    ]

    # Purpose
    PERSONAL_KEYWORDS = ["personal", "live in", "staying", "residence", "home"]
    INVESTMENT_KEYWORDS = ["invest", "rental", "return", "income", "flip"]

    # Company size
    COMPANY_SIZE_PATTERN = re.compile(r'(\d+)\s*(?:employees?|people|staff)\b', re.IGNORECASE)
    COMPANY_SIZE_BUCKETS: List[Tuple[List[str], int]] = [
        (["small company", "startup"], 20),
        (["medium", "mid-size"], 100),
        (["large", "enterprise"], 500),
    ]

    # Decision authority. Denials first: "not my decision" contains "my decision".
    DECISION_DENIALS = [
        "not my decision", "not the decision maker", "need approval",
        "need to consult", "team decision", "check with my",
    ]
    DECISION_AUTHORITY = [
        "i decide", "i am the decision", "i'm the decision", "i make the decision",
        "my decision", "i am the owner", "i'm the owner",
    ]

    def __init__(
        self,
        intent_classifier: Optional[IntentClassifier] = None,
        clock: Clock = utc_now,
    ):
        """
        Initialize the metadata extractor.

        Args:
            intent_classifier: Intent rules; a default IntentClassifier when omitted
            clock: Time source for calendar-relative timeline phrases
        """
        self.intent_classifier = intent_classifier or IntentClassifier()
        self.clock = clock

    def extract(
        self,
        message: str,
        industry: IndustryConfig,
        history: Optional[Sequence[str]] = None,
    ) -> ExtractedMetadata:
        """
        Extract a partial metadata update from the latest user message.

        Args:
            message: Latest user message
            industry: Industry of the conversation (selects the fields to extract)
            history: All user messages so far, oldest first (intent fallback only)

        Returns:
            ExtractedMetadata with the fields that matched

        Raises:
            ExtractionFailure: if a rule blows up on the input
        """
        try:
            return self._extract(message, industry, history)
        except Exception as e:
            raise ExtractionFailure(f"Metadata extraction failed: {e}") from e

    def _extract(
        self,
        message: str,
        industry: IndustryConfig,
        history: Optional[Sequence[str]],
    ) -> ExtractedMetadata:
        update = ExtractedMetadata()
        message_lower = message.lower()
        fields = INDUSTRY_FIELDS.get(industry.id, ALL_FIELDS)

        if "budget" in fields:
            update.budget = self._extract_budget(message_lower)
        if "timeline" in fields:
            update.timeline = self._extract_timeline(message_lower)
        if "location" in fields:
            update.location = self._extract_location(message)
        if "property_type" in fields:
            update.property_type = self._extract_property_type(message_lower)
        if "purpose" in fields:
            update.purpose = self._extract_purpose(message_lower)
        if "intent" in fields:
            intent = self.intent_classifier.classify(message, history)
            update.intent = intent.value if intent else None
        if "company_size" in fields:
            update.company_size = self._extract_company_size(message_lower)
        if "decision_maker" in fields:
            update.decision_maker = self._extract_decision_maker(message_lower)

        logger.debug(f"Extracted metadata for {industry.id}: {update.to_dict()}")
        return update

    @staticmethod
    def _to_number(text: str) -> float:
        return float(text.replace(",", ""))

    def _extract_budget(self, message_lower: str) -> Optional[float]:
        """Extract budget in lakhs."""
        match = self.INDIAN_BUDGET.search(message_lower)
        if match:
            value = self._to_number(match.group(1))
            if match.group(2).startswith("cr"):
                return value * 100
            return value

        match = self.WESTERN_BUDGET.search(message_lower)
        if match:
            if match.group("dollars") is not None:
                return self._to_number(match.group("dollars")) / LAKH
            value = self._to_number(match.group("amount"))
            unit = (match.group("unit") or "").lower()
            if match.group("suffix"):
                return value / LAKH
            if unit in ("k", "thousand"):
                return value / 10
            return value * 10  # m / million

        has_context = any(word in message_lower for word in self.BUDGET_CONTEXT)
        if has_context or ("max" in message_lower and "up to" in message_lower):
            match = self.BARE_NUMBER.search(message_lower)
            if match:
                value = self._to_number(match.group(1))
                # Very large numbers are raw currency, e.g. 7500000
                if value > LAKH:
                    return value / LAKH
                return value

        return None

    def _extract_timeline(self, message_lower: str) -> Optional[int]:
        """Extract timeline in months."""
        match = self.TIMELINE_PATTERN.search(message_lower)
        if match:
            number = float(match.group(1))
            unit = match.group(2)
            if unit.startswith("month"):
                months = number
            elif unit.startswith("week"):
                months = number / 4
            elif unit.startswith("year"):
                months = number * 12
            else:
                months = number / 30  # days
            return math.ceil(months)

        if any(phrase in message_lower for phrase in self.IMMEDIATE_PHRASES):
            return 1
        if any(phrase in message_lower for phrase in self.FEW_MONTHS_PHRASES):
            return 3
        if any(phrase in message_lower for phrase in self.YEAR_END_PHRASES):
            # Months left in the year, current month included
            return max(1, 12 - self.clock().month + 1)

        return None

    def _extract_location(self, message: str) -> Optional[str]:
        """Extract location from message, keeping the lead's own wording."""
        match = self.LOCATION_MARKERS.search(message)
        if match:
            location = re.sub(r'^\W+|\W+$', '', message[match.end():])
            if len(location) > 2:
                return location

        message_lower = message.lower()
        for city in self.KNOWN_CITIES:
            if re.search(rf'\b{re.escape(city)}\b', message_lower):
                return city.title()

        return None

    def _extract_property_type(self, message_lower: str) -> Optional[str]:
        """Extract property type; first keyword in table order wins."""
        for keyword, label in self.PROPERTY_TYPES:
            if keyword in message_lower:
                return label
        return None

    def _extract_purpose(self, message_lower: str) -> Optional[str]:
        """Extract purchase purpose."""
        if any(kw in message_lower for kw in self.PERSONAL_KEYWORDS):
            return "personal use"
        if any(kw in message_lower for kw in self.INVESTMENT_KEYWORDS):
            return "investment"
        return None

    def _extract_company_size(self, message_lower: str) -> Optional[int]:
        """Extract company size in employees."""
        match = self.COMPANY_SIZE_PATTERN.search(message_lower)
        if match:
            return int(match.group(1))

        for keywords, size in self.COMPANY_SIZE_BUCKETS:
            if any(kw in message_lower for kw in keywords):
                return size
        return None

    def _extract_decision_maker(self, message_lower: str) -> Optional[bool]:
        """Extract decision authority; None when the message says nothing about it."""
        if any(phrase in message_lower for phrase in self.DECISION_DENIALS):
            return False
        if any(phrase in message_lower for phrase in self.DECISION_AUTHORITY):
            return True
        return None
