"""
Pre-built dialogue flows for the lead qualification bot.
"""

from config.industries import REAL_ESTATE, SOFTWARE

from .engine import GENERIC_FLOW_ID, DialogueFlow, DialoguePolicy, DialogueRule, Stage

# Shared canned replies keyed by detected intent
INTENT_REPLIES = [
    ("buy", "That's great that you're looking to buy! What specific features are most important to you?"),
    ("rent", "I can help you find a rental. What's your preferred move-in date?"),
    ("browsing", "Feel free to explore. Is there anything specific you'd like to know more about?"),
    ("sell", "I can help you with selling. Could you tell me a bit more about what you're looking to sell?"),
]


def get_real_estate_flow() -> DialogueFlow:
    """Location, property type, budget, timeline, purpose, then a site visit."""
    return DialogueFlow(
        id=REAL_ESTATE,
        name="Real Estate Qualification",
        greeting=(
            "Hi {lead_name}! Thanks for reaching out. I'm your {brand_name} real estate assistant. "
            "Could you share which city/location you're looking for?"
        ),
        rules=[
            DialogueRule(
                id="location_opener",
                predicate=lambda c: (
                    c.stage == Stage.INITIAL_QUESTION
                    and c.has("location")
                    and not c.has("propertyType")
                ),
                template=(
                    "Great! {location} is a wonderful area. Are you looking for a flat, villa, or plot? "
                    "Also, is this for investment or personal use?"
                ),
            ),
            DialogueRule(
                id="ask_location",
                predicate=lambda c: not c.has("location"),
                template="Which city or location are you interested in for your property search?",
            ),
            DialogueRule(
                id="ask_property_type",
                predicate=lambda c: not c.has("propertyType"),
                template="What type of property are you looking for in {location}? (e.g., apartment, villa, plot)",
            ),
            DialogueRule(
                id="ask_budget",
                predicate=lambda c: not c.has("budget"),
                template="What's your budget range for the {propertyType}?",
            ),
            DialogueRule(
                id="ask_timeline",
                predicate=lambda c: not c.has("timeline"),
                template="Great! What's your timeline for moving in or making the purchase?",
            ),
            DialogueRule(
                id="ask_purpose",
                predicate=lambda c: not c.has("purpose"),
                template="Is this property for your personal use or as an investment?",
            ),
            DialogueRule(
                id="site_visit",
                predicate=lambda c: all(
                    c.has(key) for key in ("location", "propertyType", "budget", "timeline", "purpose")
                ),
                template=(
                    "Would you like to schedule a site visit to see some {propertyType} properties in "
                    "{location} that match your budget of {budget}L and timeline of {timeline} months?"
                ),
            ),
        ],
        fallback="Is there anything specific about the property you'd like to know more about?",
        intent_replies=INTENT_REPLIES,
    )


def get_software_flow() -> DialogueFlow:
    """Business need, budget, timeline, decision authority, then a demo."""
    return DialogueFlow(
        id=SOFTWARE,
        name="Software Qualification",
        greeting=(
            "Hi {lead_name}! I'm your {brand_name} software solutions consultant. "
            "What industry is your business in?"
        ),
        rules=[
            DialogueRule(
                id="ask_challenges",
                predicate=lambda c: c.stage == Stage.INITIAL_QUESTION and not c.has("budget"),
                template="Thanks for sharing that. What specific challenges are you looking to solve with our software?",
            ),
            DialogueRule(
                id="ask_budget",
                predicate=lambda c: not c.has("budget"),
                template="What's your budget range for this project?",
            ),
            DialogueRule(
                id="ask_timeline",
                predicate=lambda c: not c.has("timeline"),
                template="What's your timeline for implementing a new solution?",
            ),
            DialogueRule(
                id="ask_decision_maker",
                predicate=lambda c: c.metadata.get("decisionMaker") is None,
                template="Are you the decision maker for this purchase, or will others be involved in the decision?",
            ),
            DialogueRule(
                id="offer_demo",
                predicate=lambda c: True,
                template="Would you be interested in scheduling a demo of our software to see how it can address your needs?",
            ),
        ],
        fallback=(
            "Thank you for sharing that information. "
            "Is there anything specific about our software solutions that you'd like to know?"
        ),
        intent_replies=INTENT_REPLIES,
    )


def get_generic_flow() -> DialogueFlow:
    """Stage-keyed canned questions for industries without their own flow."""
    return DialogueFlow(
        id=GENERIC_FLOW_ID,
        name="Generic Qualification",
        greeting=(
            "Hi {lead_name}! Thanks for reaching out to {brand_name}. "
            "How can I help you today?"
        ),
        rules=[
            DialogueRule(
                id="initial_question",
                predicate=lambda c: c.stage == Stage.INITIAL_QUESTION,
                template="Thanks for your interest! Could you tell me a bit more about what you're looking for?",
            ),
            DialogueRule(
                id="information_gathering",
                predicate=lambda c: c.stage == Stage.INFORMATION_GATHERING,
                template="That's helpful. Do you have a budget and a timeline in mind?",
            ),
            DialogueRule(
                id="qualification",
                predicate=lambda c: c.stage == Stage.QUALIFICATION,
                template="Thanks for all the details. Would you like one of our specialists to follow up with you?",
            ),
        ],
        fallback="I appreciate your interest. How else can I help you today?",
        intent_replies=INTENT_REPLIES,
    )


def register_all_flows(policy: DialoguePolicy):
    """Register all pre-built flows with the policy."""
    policy.register_flow(get_real_estate_flow())
    policy.register_flow(get_software_flow())
    policy.register_flow(get_generic_flow())
