"""Tests for metadata extraction and intent classification."""

from datetime import datetime, timezone

import pytest

from lead_scoring.entity_extractor import MetadataExtractor
from lead_scoring.exceptions import ExtractionFailure
from lead_scoring.intent_classifier import Intent, IntentClassifier


# ── Budget ─────────────────────────────────────────────

class TestBudget:
    @pytest.mark.parametrize("text, expected", [
        ("50L", 50),
        ("around 1.5 crore", 150),
        ("budget is 7500000", 75),
        ("2k budget", 0.2),
        ("my budget is 75,00,000", 75),
        ("about 40 lakhs", 40),
        ("2 Cr max", 200),
        ("$5000", 0.05),
        ("5000$ at most", 0.05),
        ("around 2 million", 20),
        ("I can spend 60", 60),
    ])
    def test_budget_normalized_to_lakhs(self, extractor, real_estate, text, expected):
        assert extractor.extract(text, real_estate).budget == pytest.approx(expected)

    def test_bare_number_needs_budget_context(self, extractor, real_estate):
        assert extractor.extract("we are 4 people", real_estate).budget is None
        assert extractor.extract("up to 80", real_estate).budget is None

    def test_max_up_to_phrase(self, extractor, real_estate):
        assert extractor.extract("max 80, up to that", real_estate).budget == 80

    def test_indian_units_take_priority(self, extractor, real_estate):
        assert extractor.extract("50 lakh, that's about $60k", real_estate).budget == 50


# ── Timeline ───────────────────────────────────────────

class TestTimeline:
    @pytest.mark.parametrize("text, expected", [
        ("2 years", 24),
        ("3 weeks", 1),
        ("10 days", 1),
        ("asap", 1),
        ("in 5 months", 5),
        ("6 weeks from now", 2),
        ("right away please", 1),
        ("in a few months", 3),
        ("a couple of months", 3),
        ("in 1.5 years", 18),
        ("about 2.5 months", 3),
    ])
    def test_timeline_normalized_to_months(self, extractor, real_estate, text, expected):
        assert extractor.extract(text, real_estate).timeline == expected

    def test_end_of_year_uses_clock(self, real_estate):
        october = MetadataExtractor(clock=lambda: datetime(2026, 10, 19, tzinfo=timezone.utc))
        january = MetadataExtractor(clock=lambda: datetime(2026, 1, 5, tzinfo=timezone.utc))
        december = MetadataExtractor(clock=lambda: datetime(2026, 12, 30, tzinfo=timezone.utc))

        assert october.extract("by the end of the year", real_estate).timeline == 3
        assert january.extract("end of year", real_estate).timeline == 12
        assert december.extract("by december", real_estate).timeline == 1

    def test_no_timeline(self, extractor, real_estate):
        assert extractor.extract("not decided yet", real_estate).timeline is None


# ── Location ───────────────────────────────────────────

class TestLocation:
    def test_known_city_capitalized(self, extractor, real_estate):
        assert extractor.extract("mumbai", real_estate).location == "Mumbai"
        assert extractor.extract("somewhere in new delhi", real_estate).location == "New Delhi"

    def test_text_after_marker(self, extractor, real_estate):
        result = extractor.extract("I'm looking in Andheri West.", real_estate)
        assert result.location == "Andheri West"

    def test_earliest_marker_wins(self, extractor, real_estate):
        result = extractor.extract("location: Whitefield, near the metro", real_estate)
        assert result.location == "Whitefield, near the metro"

    def test_short_marker_text_falls_back_to_city(self, extractor, real_estate):
        assert extractor.extract("Pune, near it", real_estate).location == "Pune"

    def test_no_location(self, extractor, real_estate):
        assert extractor.extract("2bhk please", real_estate).location is None


# ── Property type, purpose ─────────────────────────────

class TestPropertyType:
    @pytest.mark.parametrize("text, expected", [
        ("2bhk", "2BHK"),
        ("a 3 bhk flat", "3BHK"),
        ("independent villa", "Villa"),
        ("a plot of land", "Plot/Land"),
        ("studio apartment", "Studio Apartment"),
        ("small office", "Office Space"),
        ("apartment", "Apartment/Flat"),
    ])
    def test_property_type(self, extractor, real_estate, text, expected):
        assert extractor.extract(text, real_estate).property_type == expected

    def test_first_entry_in_table_order_wins(self, extractor, real_estate):
        # "villa" appears first in the text but the table lists BHK sizes first
        assert extractor.extract("villa or 2bhk", real_estate).property_type == "2BHK"


class TestPurpose:
    def test_personal_use(self, extractor, real_estate):
        assert extractor.extract("personal use", real_estate).purpose == "personal use"

    def test_investment(self, extractor, real_estate):
        assert extractor.extract("purely an investment", real_estate).purpose == "investment"

    def test_personal_checked_before_investment(self, extractor, real_estate):
        assert extractor.extract("a home that also gives rental income", real_estate).purpose == "personal use"


# ── Software fields ────────────────────────────────────

class TestSoftwareFields:
    def test_company_size_number(self, extractor, software):
        assert extractor.extract("we have 120 employees", software).company_size == 120

    def test_company_size_bucket(self, extractor, software):
        assert extractor.extract("we're an early startup", software).company_size == 20
        assert extractor.extract("a large enterprise", software).company_size == 500
        assert extractor.extract("a mid-size team", software).company_size == 100
        assert extractor.extract("medium sized business", software).company_size == 100

    def test_decision_maker(self, extractor, software):
        assert extractor.extract("I am the decision maker", software).decision_maker is True
        assert extractor.extract("it's not my decision", software).decision_maker is False
        assert extractor.extract("sounds good", software).decision_maker is None

    def test_software_skips_real_estate_fields(self, extractor, software):
        result = extractor.extract("looking in Pune, 2bhk, budget 2 million", software)
        assert result.location is None
        assert result.property_type is None
        assert result.budget == 20

    def test_unconfigured_industry_extracts_everything(self, extractor, insurance):
        result = extractor.extract("Mumbai, 50 employees, budget 10L", insurance)
        assert result.location == "Mumbai"
        assert result.company_size == 50
        assert result.budget == 10


# ── Update shape ───────────────────────────────────────

class TestExtractedMetadata:
    def test_to_dict_only_present_fields(self, extractor, real_estate):
        result = extractor.extract("2bhk in Mumbai for 50L", real_estate)
        assert result.to_dict() == {"budget": 50, "location": "Mumbai", "propertyType": "2BHK"}

    def test_empty_update(self, extractor, real_estate):
        assert extractor.extract("hello", real_estate).is_empty()

    def test_failure_is_wrapped(self, extractor, real_estate, monkeypatch):
        def boom(message_lower):
            raise RuntimeError("bad rule")

        monkeypatch.setattr(extractor, "_extract_budget", boom)
        with pytest.raises(ExtractionFailure):
            extractor.extract("50L", real_estate)


# ── Intent Classifier ─────────────────────────────────

class TestIntentClassifier:
    @pytest.fixture
    def classifier(self):
        return IntentClassifier()

    @pytest.mark.parametrize("text, expected", [
        ("I want to buy a flat", Intent.BUY),
        ("looking to rent near the station", Intent.RENT),
        ("just browsing for now", Intent.BROWSING),
        ("I want to sell my house", Intent.SELL),
        ("we plan to purchase soon", Intent.BUY),
    ])
    def test_phrase_intent(self, classifier, text, expected):
        assert classifier.classify(text) == expected

    def test_keyword_fallback_uses_history(self, classifier):
        assert classifier.classify("ok", ["we might rent first", "ok"]) == Intent.RENT

    def test_keywords_match_whole_words(self, classifier):
        assert classifier.classify("rental yield matters") is None

    def test_phrase_priority(self, classifier):
        # buy phrases are checked before sell phrases
        assert classifier.classify("want to sell my flat and want to buy a villa") == Intent.BUY

    def test_no_intent(self, classifier):
        assert classifier.classify("hello there") is None
