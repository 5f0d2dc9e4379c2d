"""
Tests for the category decision rules.
"""

import pytest

from app.services.decision import (
    extract_flagged_categories,
    get_priority,
    format_reason,
    format_description,
    build_report_row,
)


class TestExtractFlaggedCategories:
    """Test flagged category extraction."""

    def test_preserves_input_order(self):
        """Only true categories are returned, in key order."""
        categories = {"hate": True, "violence": False, "harassment": True}
        assert extract_flagged_categories(categories) == ["hate", "harassment"]

    def test_no_true_categories(self):
        assert extract_flagged_categories({"hate": False, "sexual": False}) == []

    def test_empty_mapping(self):
        assert extract_flagged_categories({}) == []


class TestPriority:
    """Test priority derivation."""

    @pytest.mark.parametrize("category", [
        "violence",
        "violence/graphic",
        "self-harm",
        "self-harm/intent",
        "self-harm/instructions",
    ])
    def test_critical_categories(self, category):
        categories = {"hate": False, "harassment": True, category: True}
        assert get_priority(categories) == "critical"

    def test_non_critical_category_is_high(self):
        assert get_priority({"harassment": True}) == "high"

    def test_critical_category_set_false_is_high(self):
        """A critical category that is present but false does not raise priority."""
        assert get_priority({"violence": False, "hate": True}) == "high"

    def test_no_true_category_falls_back_to_high(self):
        assert get_priority({"violence": False, "self-harm": False}) == "high"


class TestReasonAndDescription:
    """Test report text formatting."""

    def test_format_reason_empty(self):
        assert format_reason([]) == "AI Detection: Unspecified violation"

    def test_format_reason_joins_categories(self):
        assert format_reason(["hate", "violence"]) == "AI Detection: hate, violence"

    def test_format_description(self):
        description = format_description("comment", ["harassment", "hate"])
        assert description == "Automatic AI moderation flagged this comment for: harassment, hate"

    def test_format_description_without_categories(self):
        description = format_description("post", [])
        assert description == "Automatic AI moderation flagged this post for: "


class TestBuildReportRow:
    """Test report row construction."""

    def _row(self, entity_type):
        return build_report_row(
            community_id="community-1",
            accused_id="user-1",
            entity_id="entity-1",
            entity_type=entity_type,
            reason="AI Detection: hate",
            description="Automatic AI moderation flagged this post for: hate",
            priority="high",
        )

    def test_post_sets_only_post_id(self):
        row = self._row("post")
        assert row["post_id"] == "entity-1"
        assert row["comment_id"] is None

    def test_comment_sets_only_comment_id(self):
        row = self._row("comment")
        assert row["comment_id"] == "entity-1"
        assert row["post_id"] is None

    def test_system_report_fields(self):
        row = self._row("post")
        assert row["reporter_id"] is None
        assert row["accused_id"] == "user-1"
        assert row["status"] == "pending"
        assert row["priority"] == "high"

    def test_unknown_entity_type_rejected(self):
        with pytest.raises(ValueError):
            self._row("profile")
