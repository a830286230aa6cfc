"""
Tests for the AI insight collaborator and its fallback path.
"""

import pytest

from analog_backend.ai.insights import (
    FALLBACK_INSIGHT,
    generate_filter_insights,
    request_insights,
)
from analog_backend.ai.prompts import build_insight_prompt, describe_spec
from analog_engine.models import FilterClass, FilterSpecification, Topology



class TestPrompt:
    """Test the textual summary handed to the model."""

    def test_contains_core_parameters(self):
        text = describe_spec(FilterSpecification(order=3, cutoff_frequency_hz=2500.0))
        assert "- Type: LOW_PASS" in text
        assert "- Topology: PASSIVE" in text
        assert "- Order: 3" in text
        assert "- Cutoff Frequency: 2500 Hz" in text

    def test_second_cutoff_only_for_band_pass(self):
        assert "Second Cutoff" not in describe_spec(FilterSpecification())
        band = describe_spec(FilterSpecification(filter_class=FilterClass.BAND_PASS))
        assert "Second Cutoff: 5000000.0 Hz" in band

    def test_order_in_requests(self):
        prompt = build_insight_prompt(FilterSpecification(order=7))
        assert "choosing order 7" in prompt
        assert "<filter_spec>" in prompt


class TestGenerateInsights:
    """Test the call and its degradation."""

    def test_returns_model_text(self, make_ai):
        fake = make_ai(text="  Steep roll-off.  ")
        assert generate_filter_insights(FilterSpecification(), fake) == "Steep roll-off."
        call = fake.messages.calls[0]
        assert call["messages"][0]["role"] == "user"
        assert "system" in call

    def test_model_override(self, monkeypatch, make_ai):
        monkeypatch.setenv("INSIGHT_MODEL", "claude-test")
        fake = make_ai(text="ok")
        generate_filter_insights(FilterSpecification(), fake)
        assert fake.messages.calls[0]["model"] == "claude-test"

    def test_sdk_error_falls_back(self, make_ai):
        fake = make_ai(error=RuntimeError("connection reset"))
        assert generate_filter_insights(FilterSpecification(topology=Topology.ACTIVE), fake) == FALLBACK_INSIGHT

    def test_empty_response_falls_back(self, make_ai):
        assert generate_filter_insights(FilterSpecification(), make_ai(text="   ")) == FALLBACK_INSIGHT

    def test_missing_key_falls_back(self, no_ai):
        assert generate_filter_insights(FilterSpecification()) == FALLBACK_INSIGHT

    def test_request_insights_raises(self, no_ai):
        with pytest.raises(RuntimeError):
            request_insights(FilterSpecification())

    def test_failure_is_logged(self, caplog, make_ai):
        fake = make_ai(error=RuntimeError("boom"))
        with caplog.at_level("WARNING", logger="analog_backend.ai.insights"):
            generate_filter_insights(FilterSpecification(), fake)
        assert "Insight generation failed" in caplog.text
