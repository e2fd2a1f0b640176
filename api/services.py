"""
Service initialization and dependency injection for the Lead Qualification API.

Creates and manages all service instances used by the API. One container is
built per application and kept on ``app.state``.
"""

import logging
from typing import Optional

from fastapi import Request

from config.industries import IndustryRegistry
from config.settings import get_settings, Settings
from conversations.db_ledger import DbClassificationLedger
from conversations.finalizer import Finalizer
from conversations.ledger import ClassificationLedger, InMemoryClassificationLedger
from conversations.service import ConversationService
from conversations.store import InMemoryConversationStore
from dialogue.definitions import register_all_flows
from dialogue.engine import DialoguePolicy
from lead_scoring.clock import Clock, utc_now
from lead_scoring.entity_extractor import MetadataExtractor
from lead_scoring.intent_classifier import IntentClassifier
from lead_scoring.scoring_model import LeadClassifier

logger = logging.getLogger(__name__)


class Services:
    """Container for all application services."""

    def __init__(self, settings: Optional[Settings] = None, clock: Clock = utc_now):
        self.settings: Settings = settings or get_settings()
        self.clock = clock
        self.registry: Optional[IndustryRegistry] = None
        self.ledger: Optional[ClassificationLedger] = None
        self.extractor: Optional[MetadataExtractor] = None
        self.classifier: Optional[LeadClassifier] = None
        self.policy: Optional[DialoguePolicy] = None
        self.conversation_service: Optional[ConversationService] = None
        self._db_initialized = False
        self._initialized = False

    async def initialize(self):
        """Initialize all services."""
        if self._initialized:
            return

        logger.info(f"Initializing services for brand: {self.settings.brand_name}")

        self._init_registry()
        await self._init_ledger()
        self._init_lead_scoring()
        self._init_dialogue()
        self._init_conversations()

        self._initialized = True
        logger.info("All services initialized successfully")

    async def shutdown(self):
        if self._db_initialized:
            from database.session import close_db
            await close_db()
            self._db_initialized = False

    def _init_registry(self):
        """Load industry configurations."""
        s = self.settings
        if s.industries_directory:
            self.registry = IndustryRegistry.from_directory(s.industries_directory)
        else:
            self.registry = IndustryRegistry()
        logger.info(f"Industries ready: {[c.id for c in self.registry.list_all()]}")

    async def _init_ledger(self):
        """Initialize the classification ledger."""
        s = self.settings

        if not s.uses_database:
            logger.warning("DATABASE_URL not set, classification records kept in memory")
            self.ledger = InMemoryClassificationLedger()
            return

        from database.session import init_db
        session_factory = await init_db(s.database_url)
        self._db_initialized = True
        self.ledger = DbClassificationLedger(session_factory)
        logger.info("Database classification ledger ready")

    def _init_lead_scoring(self):
        """Initialize extraction and classification."""
        self.extractor = MetadataExtractor(intent_classifier=IntentClassifier(), clock=self.clock)
        self.classifier = LeadClassifier()
        logger.info("Lead scoring services ready")

    def _init_dialogue(self):
        self.policy = DialoguePolicy(brand_name=self.settings.brand_name)
        register_all_flows(self.policy)

    def _init_conversations(self):
        """Initialize the conversation service."""
        finalizer = Finalizer(
            classifier=self.classifier,
            ledger=self.ledger,
            clock=self.clock,
            generic_after_minutes=self.settings.generic_finalize_after_minutes,
        )
        self.conversation_service = ConversationService(
            registry=self.registry,
            store=InMemoryConversationStore(),
            extractor=self.extractor,
            policy=self.policy,
            finalizer=finalizer,
            clock=self.clock,
            default_industry=self.settings.default_industry,
        )
        logger.info("Conversation service ready")

    @property
    def is_ready(self) -> bool:
        return self._initialized and self.conversation_service is not None

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "industries": len(self.registry.list_all()) if self.registry else 0,
            "ledger": type(self.ledger).__name__ if self.ledger else None,
            "conversations": self.conversation_service is not None,
        }


def get_services(request: Request) -> Services:
    """FastAPI dependency returning the application's services container."""
    return request.app.state.services
