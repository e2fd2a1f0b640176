"""Tests for the dialogue policy."""

import pytest

from config.industries import IndustryConfig
from dialogue.engine import DialogueFlow, DialoguePolicy, DialogueRule, Stage, stage_for


@pytest.mark.parametrize("count, stage", [
    (0, Stage.GREETING),
    (1, Stage.INITIAL_QUESTION),
    (2, Stage.INFORMATION_GATHERING),
    (3, Stage.INFORMATION_GATHERING),
    (4, Stage.QUALIFICATION),
    (10, Stage.QUALIFICATION),
])
def test_stage_for(count, stage):
    assert stage_for(count) == stage


# ── Real estate ───────────────────────────────────────

class TestRealEstateFlow:
    def test_greeting_names_lead_and_brand(self, policy, real_estate):
        greeting = policy.greeting(real_estate, "Asha")
        assert greeting.startswith("Hi Asha!")
        assert "GrowEasy real estate assistant" in greeting

    def test_asks_location_first(self, policy, real_estate):
        reply = policy.next_reply(real_estate, {}, 1, "Asha")
        assert reply == "Which city or location are you interested in for your property search?"

    def test_location_opener_on_first_answer(self, policy, real_estate):
        reply = policy.next_reply(real_estate, {"location": "Mumbai"}, 1, "Asha")
        assert reply.startswith("Great! Mumbai is a wonderful area.")

    def test_asks_property_type_after_location(self, policy, real_estate):
        reply = policy.next_reply(real_estate, {"location": "Mumbai"}, 2, "Asha")
        assert reply == "What type of property are you looking for in Mumbai? (e.g., apartment, villa, plot)"

    def test_question_order(self, policy, real_estate):
        metadata = {"location": "Pune", "propertyType": "Villa"}
        assert "budget" in policy.next_reply(real_estate, metadata, 3, "Asha")

        metadata["budget"] = 80.0
        assert "timeline" in policy.next_reply(real_estate, metadata, 4, "Asha")

        metadata["timeline"] = 6
        assert "personal use or as an investment" in policy.next_reply(real_estate, metadata, 5, "Asha")

    def test_site_visit_when_everything_known(self, policy, real_estate):
        metadata = {
            "location": "Mumbai",
            "propertyType": "2BHK",
            "budget": 50.0,
            "timeline": 3,
            "purpose": "personal use",
        }
        reply = policy.next_reply(real_estate, metadata, 6, "Asha")
        assert reply == (
            "Would you like to schedule a site visit to see some 2BHK properties in "
            "Mumbai that match your budget of 50L and timeline of 3 months?"
        )

    def test_missing_earlier_field_asked_first(self, policy, real_estate):
        # budget known but location missing: location is asked
        reply = policy.next_reply(real_estate, {"budget": 50.0}, 3, "Asha")
        assert "location" in reply


# ── Software ──────────────────────────────────────────

class TestSoftwareFlow:
    def test_greeting(self, policy, software):
        assert "software solutions consultant" in policy.greeting(software, "Ravi")

    def test_budget_timeline_decision_maker_then_demo(self, policy, software):
        assert "budget" in policy.next_reply(software, {}, 2, "Ravi")
        assert "timeline" in policy.next_reply(software, {"budget": 20.0}, 3, "Ravi")
        assert "decision maker" in policy.next_reply(software, {"budget": 20.0, "timeline": 2}, 4, "Ravi")

        metadata = {"budget": 20.0, "timeline": 2, "decisionMaker": False}
        assert "demo" in policy.next_reply(software, metadata, 5, "Ravi")

    def test_challenges_question_first(self, policy, software):
        assert "challenges" in policy.next_reply(software, {}, 1, "Ravi")


# ── Generic / fallbacks ───────────────────────────────

class TestGenericFlow:
    def test_unconfigured_industry_uses_stage_text(self, policy, insurance):
        assert "tell me a bit more" in policy.next_reply(insurance, {}, 1, "Meera")
        assert "budget and a timeline" in policy.next_reply(insurance, {}, 2, "Meera")
        assert "specialists" in policy.next_reply(insurance, {}, 4, "Meera")

    def test_generic_greeting(self, policy, insurance):
        assert policy.greeting(insurance, "Meera") == (
            "Hi Meera! Thanks for reaching out to GrowEasy. How can I help you today?"
        )

    def test_fallback_reply(self, policy, real_estate):
        assert policy.fallback_reply(real_estate) == (
            "Is there anything specific about the property you'd like to know more about?"
        )


class TestIntentReplies:
    @pytest.fixture
    def custom_policy(self):
        policy = DialoguePolicy(brand_name="Acme")
        policy.register_flow(DialogueFlow(
            id="cars",
            name="Cars",
            greeting="Hello {lead_name}",
            rules=[
                DialogueRule(id="never", predicate=lambda c: False, template="unused"),
            ],
            fallback="Anything else?",
            intent_replies=[("buy", "Great, which model?"), ("rent", "For how long?")],
        ))
        return policy

    def test_intent_reply_when_no_rule_matches(self, custom_policy):
        cars = IndustryConfig(id="cars", name="Cars")
        assert custom_policy.next_reply(cars, {"intent": "rent"}, 2, "Sam") == "For how long?"

    def test_industry_fallback_last(self, custom_policy):
        cars = IndustryConfig(id="cars", name="Cars")
        assert custom_policy.next_reply(cars, {"intent": "sell"}, 2, "Sam") == "Anything else?"
        assert custom_policy.next_reply(cars, {}, 2, "Sam") == "Anything else?"

    def test_no_flow_registered(self, custom_policy):
        with pytest.raises(LookupError):
            custom_policy.greeting(IndustryConfig(id="boats", name="Boats"), "Sam")
