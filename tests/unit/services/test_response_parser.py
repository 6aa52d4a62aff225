"""Tests for model reply validation."""

import json

import pytest

from finsight.core.entities import ProjectionConfidence
from finsight.core.exceptions import ResponseStructureError
from finsight.core.services.response_parser import extract_json_object, parse_insight_reply


def _reply(**overrides) -> str:
    body = {
        "monthlySummary": "A steady month.",
        "categoryInsights": [
            {"category": "Food", "total_spent": 600, "percentage_of_total": 40, "insight": "Top."}
        ],
    }
    body.update(overrides)
    return json.dumps(body)


class TestExtractJsonObject:
    """Tests for extract_json_object()."""

    def test_prose_only(self):
        """Test that prose without braces is rejected."""
        with pytest.raises(ResponseStructureError, match="No JSON found in AI response"):
            extract_json_object("I'm sorry, I can't help with that.")

    def test_broken_json(self):
        """Test that truncated JSON is rejected."""
        with pytest.raises(ResponseStructureError, match="No JSON found"):
            extract_json_object('{"monthlySummary": ')

    def test_surrounding_prose_ignored(self):
        """Test surrounding prose ignored."""
        assert extract_json_object('Sure! {"a": {"b": 1}} Thanks.') == {"a": {"b": 1}}

    def test_empty(self):
        """Test that an empty reply is rejected."""
        with pytest.raises(ResponseStructureError):
            extract_json_object("")


class TestParseInsightReply:
    """Tests for parse_insight_reply()."""

    def test_full_reply(self, valid_reply):
        """Test parsing a reply with every section."""
        parsed = parse_insight_reply(valid_reply)
        assert parsed.monthly_summary.startswith("You spent")
        assert parsed.category_insights[0].category == "Food"
        assert parsed.spending_spikes[0].date == "2024-01-09"
        assert parsed.recommendations == ["Plan meals ahead", "Use a shopping list"]
        assert parsed.projections.confidence == ProjectionConfidence.MEDIUM

    def test_missing_summary(self):
        """Test that a missing summary is rejected."""
        with pytest.raises(ResponseStructureError, match="Invalid or missing monthlySummary"):
            parse_insight_reply(_reply(monthlySummary=""))

    def test_missing_category_insights(self):
        """Test missing category insights."""
        reply = json.dumps({"monthlySummary": "ok"})
        with pytest.raises(ResponseStructureError, match="Invalid or missing categoryInsights"):
            parse_insight_reply(reply)

    def test_empty_category_insights_allowed(self):
        """Test empty category insights allowed."""
        parsed = parse_insight_reply(_reply(categoryInsights=[]))
        assert parsed.category_insights == []

    def test_invalid_category_item_reports_index(self):
        """Test invalid category item reports index."""
        items = [
            {"category": "Food", "total_spent": 1, "percentage_of_total": 1, "insight": "x"},
            {"category": "Fun", "total_spent": "lots", "percentage_of_total": 1, "insight": "x"},
        ]
        with pytest.raises(ResponseStructureError, match="Invalid category insight at index 1"):
            parse_insight_reply(_reply(categoryInsights=items))

    def test_boolean_is_not_a_number(self):
        """Test boolean is not a number."""
        items = [{"category": "Food", "total_spent": True, "percentage_of_total": 1, "insight": "x"}]
        with pytest.raises(ResponseStructureError):
            parse_insight_reply(_reply(categoryInsights=items))

    def test_optional_fields_default(self):
        """Test optional fields default."""
        parsed = parse_insight_reply(_reply())
        assert parsed.spending_spikes == []
        assert parsed.recommendations == []
        assert parsed.projections is None

    def test_non_list_optionals_coerced(self):
        """Test non list optionals coerced."""
        parsed = parse_insight_reply(_reply(spendingSpikes="none", recommendations={"a": 1}))
        assert parsed.spending_spikes == []
        assert parsed.recommendations == []

    def test_malformed_spikes_and_recommendations_filtered(self):
        """Test malformed spikes and recommendations filtered."""
        spikes = [
            {"date": "2024-01-02", "amount": 90, "category": "Fun", "description": "Concert"},
            {"date": "2024-01-03", "amount": "ninety"},
        ]
        parsed = parse_insight_reply(_reply(spendingSpikes=spikes, recommendations=["Save", 3]))
        assert len(parsed.spending_spikes) == 1
        assert parsed.recommendations == ["Save"]

    def test_partial_projections_dropped(self):
        """Test partial projections dropped."""
        projections = {"next_week": 100, "next_month": 400, "confidence": "high"}
        parsed = parse_insight_reply(_reply(projections=projections))
        assert parsed.projections is None

    def test_unknown_confidence_drops_projections(self):
        """Test unknown confidence drops projections."""
        projections = {
            "next_week": 100,
            "next_month": 400,
            "confidence": "certain",
            "explanation": "x",
        }
        assert parse_insight_reply(_reply(projections=projections)).projections is None
