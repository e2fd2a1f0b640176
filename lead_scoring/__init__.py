"""
Lead Scoring Module for the lead qualification engine.

This module provides the deterministic qualification core:
- Intent classification (buy, rent, browsing, sell)
- Metadata extraction (budget, timeline, location, property type, ...)
- Lead classification (Hot / Cold / Invalid with confidence and reasons)
"""

from .intent_classifier import IntentClassifier, Intent
from .entity_extractor import MetadataExtractor, ExtractedMetadata
from .scoring_model import LeadClassifier, ClassificationResult, LeadStatus
from .exceptions import (
    LeadQualifierError,
    ValidationError,
    NotFoundError,
    AuthorizationError,
    ExtractionFailure,
    PersistenceError,
)

__all__ = [
    "IntentClassifier",
    "Intent",
    "MetadataExtractor",
    "ExtractedMetadata",
    "LeadClassifier",
    "ClassificationResult",
    "LeadStatus",
    "LeadQualifierError",
    "ValidationError",
    "NotFoundError",
    "AuthorizationError",
    "ExtractionFailure",
    "PersistenceError",
]
