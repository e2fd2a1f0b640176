"""
Dialogue Policy Engine for the lead qualification bot.

Picks the next bot utterance from what is already known about the lead.
Each industry registers a flow: an ordered list of (predicate, template)
rules. The first rule whose predicate holds is rendered; when none holds,
the flow's intent-keyed reply is used, then its generic fallback.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Tuple

from config.industries import IndustryConfig

logger = logging.getLogger(__name__)

GENERIC_FLOW_ID = "generic"


class Stage(Enum):
    GREETING = "greeting"
    INITIAL_QUESTION = "initial_question"
    INFORMATION_GATHERING = "information_gathering"
    QUALIFICATION = "qualification"


def stage_for(user_message_count: int) -> Stage:
    """Dialogue stage derived from how many user messages have been received."""
    if user_message_count <= 0:
        return Stage.GREETING
    if user_message_count == 1:
        return Stage.INITIAL_QUESTION
    if user_message_count < 4:
        return Stage.INFORMATION_GATHERING
    return Stage.QUALIFICATION


def _format_number(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


@dataclass(frozen=True)
class DialogueContext:
    """Everything a rule may look at."""
    stage: Stage
    metadata: Mapping[str, Any]
    lead_name: str
    brand_name: str

    def has(self, key: str) -> bool:
        return self.metadata.get(key) is not None

    def template_values(self) -> Dict[str, str]:
        values = {
            "lead_name": self.lead_name,
            "brand_name": self.brand_name,
        }
        for key in ("location", "propertyType", "budget", "timeline", "purpose", "intent", "companySize"):
            value = self.metadata.get(key)
            values[key] = _format_number(value) if value is not None else ""
        return values


@dataclass
class DialogueRule:
    """One step of a flow: ask `template` when `predicate` holds."""
    id: str
    predicate: Callable[[DialogueContext], bool]
    template: str

    def render(self, context: DialogueContext) -> str:
        return self.template.format_map(context.template_values())


@dataclass
class DialogueFlow:
    """Complete question order for one industry."""
    id: str
    name: str
    greeting: str
    rules: List[DialogueRule]
    fallback: str
    intent_replies: List[Tuple[str, str]] = field(default_factory=list)


class DialoguePolicy:
    """
    Chooses the next bot reply for a conversation.

    Flows are looked up by industry id; industries without a registered flow
    use the generic flow.
    """

    def __init__(self, brand_name: str = "GrowEasy"):
        self.brand_name = brand_name
        self._flows: Dict[str, DialogueFlow] = {}

    def register_flow(self, flow: DialogueFlow):
        self._flows[flow.id] = flow
        logger.info(f"Dialogue flow registered: {flow.name} ({len(flow.rules)} rules)")

    def get_flow(self, industry: IndustryConfig) -> DialogueFlow:
        flow = self._flows.get(industry.id) or self._flows.get(GENERIC_FLOW_ID)
        if flow is None:
            raise LookupError(f"No dialogue flow for industry {industry.id} and no generic flow registered")
        return flow

    def greeting(self, industry: IndustryConfig, lead_name: str) -> str:
        """Opening message sent when a conversation is created."""
        flow = self.get_flow(industry)
        context = self._context(Stage.GREETING, {}, lead_name)
        return flow.greeting.format_map(context.template_values())

    def next_reply(
        self,
        industry: IndustryConfig,
        metadata: Mapping[str, Any],
        user_message_count: int,
        lead_name: str,
    ) -> str:
        """
        Get the next bot reply.

        Args:
            industry: Conversation industry
            metadata: Accumulated lead metadata
            user_message_count: Number of user messages so far (drives the stage)
            lead_name: Lead's name for personalised templates

        Returns:
            Reply text
        """
        flow = self.get_flow(industry)
        context = self._context(stage_for(user_message_count), metadata, lead_name)

        for rule in flow.rules:
            if rule.predicate(context):
                logger.debug(f"Dialogue rule {flow.id}.{rule.id} matched at stage {context.stage.value}")
                return rule.render(context)

        intent = metadata.get("intent")
        for intent_value, reply in flow.intent_replies:
            if intent == intent_value:
                return reply.format_map(context.template_values())

        return self.fallback_reply(industry)

    def fallback_reply(self, industry: IndustryConfig) -> str:
        """Industry-level generic question, also used when a turn could not be processed."""
        return self.get_flow(industry).fallback

    def _context(self, stage: Stage, metadata: Mapping[str, Any], lead_name: str) -> DialogueContext:
        return DialogueContext(
            stage=stage,
            metadata=dict(metadata),
            lead_name=lead_name,
            brand_name=self.brand_name,
        )
