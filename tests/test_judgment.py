"""Tests for provider response validation and coercion."""

from __future__ import annotations

from poly_edge.common.llm import extract_json_object
from poly_edge.oracle.judgment import parse_judgment, validate_payload
from poly_edge.oracle.models import InvalidJudgment, ValidJudgment
from poly_edge.signals.models import Direction


class TestExtractJsonObject:
    def test_plain_object(self):
        assert extract_json_object('{"score": 9}') == {"score": 9}

    def test_code_fence(self):
        text = '```json\n{"direction": "YES"}\n```'
        assert extract_json_object(text) == {"direction": "YES"}

    def test_not_json(self):
        assert extract_json_object("I think YES, strongly.") is None

    def test_array_is_not_object(self):
        assert extract_json_object("[1, 2]") is None

    def test_empty(self):
        assert extract_json_object("") is None


class TestValidatePayload:
    def test_full_payload(self):
        judgment = validate_payload("claude", {
            "score": 9.1,
            "direction": "YES",
            "conviction": "HIGH",
            "reasoning": ["Whales loading", "Funding negative"],
            "targetPrice": 0.62,
            "stopLoss": 0.31,
        })

        assert isinstance(judgment, ValidJudgment)
        assert judgment.provider == "claude"
        assert judgment.score == 9.1
        assert judgment.direction == Direction.YES
        assert judgment.conviction == "HIGH"
        assert judgment.reasoning == ("Whales loading", "Funding negative")
        assert judgment.target_price == 0.62
        assert judgment.stop_loss == 0.31

    def test_missing_keys_use_defaults(self):
        judgment = validate_payload("gemini", {"conviction": "LOW"})

        assert isinstance(judgment, ValidJudgment)
        assert judgment.score == 0.0
        assert judgment.direction == Direction.NO
        assert judgment.reasoning == ()
        assert judgment.target_price is None
        assert judgment.stop_loss is None

    def test_extra_keys_ignored(self):
        judgment = validate_payload("claude", {"score": 7, "mood": "bullish"})
        assert isinstance(judgment, ValidJudgment)
        assert judgment.score == 7.0

    def test_no_recognized_keys_is_invalid(self):
        judgment = validate_payload("claude", {"verdict": "YES"})
        assert isinstance(judgment, InvalidJudgment)

    def test_empty_object_is_invalid(self):
        assert isinstance(validate_payload("claude", {}), InvalidJudgment)

    def test_non_object_is_invalid(self):
        assert isinstance(validate_payload("claude", ["YES"]), InvalidJudgment)

    def test_score_coercion(self):
        assert validate_payload("p", {"score": "8.5"}).score == 8.5
        assert validate_payload("p", {"score": "high"}).score == 0.0
        assert validate_payload("p", {"score": None}).score == 0.0
        assert validate_payload("p", {"score": True}).score == 0.0

    def test_direction_coercion(self):
        assert validate_payload("p", {"direction": "yes"}).direction == Direction.YES
        assert validate_payload("p", {"direction": " YES "}).direction == Direction.YES
        assert validate_payload("p", {"direction": "NO"}).direction == Direction.NO
        assert validate_payload("p", {"direction": "SHADOW_WHALE"}).direction == Direction.NO
        assert validate_payload("p", {"direction": 1}).direction == Direction.NO

    def test_reasoning_coercion(self):
        assert validate_payload("p", {"reasoning": "one line"}).reasoning == ("one line",)
        assert validate_payload("p", {"reasoning": ["a", 3, "", None, "b"]}).reasoning == ("a", "b")
        assert validate_payload("p", {"reasoning": {"a": 1}}).reasoning == ()

    def test_price_coercion(self):
        judgment = validate_payload("p", {"targetPrice": "0.7", "stopLoss": "tight"})
        assert judgment.target_price == 0.7
        assert judgment.stop_loss is None


class TestParseJudgment:
    def test_valid_text(self):
        judgment = parse_judgment("claude", '{"score": 8, "direction": "NO"}')
        assert isinstance(judgment, ValidJudgment)
        assert judgment.direction == Direction.NO

    def test_malformed_text(self):
        judgment = parse_judgment("claude", '{"score": 8,')
        assert isinstance(judgment, InvalidJudgment)
        assert judgment.provider == "claude"
        assert "JSON" in judgment.error
