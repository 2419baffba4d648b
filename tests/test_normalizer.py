"""Tests for agent result normalization."""

from trendclip.agents.normalizer import decode_payload, normalize_result
from trendclip.models.payload import Structured, Unparsed


class TestNormalizeResult:
    def test_none(self):
        assert normalize_result(None) == {}

    def test_empty_string(self):
        assert normalize_result("") == {}

    def test_empty_mapping(self):
        assert normalize_result({}) == {}

    def test_json_string(self):
        assert normalize_result('{"a":1}') == {"a": 1}

    def test_plain_string_is_wrapped(self):
        assert normalize_result("hello") == {"text": "hello"}

    def test_json_array_string_is_wrapped(self):
        assert normalize_result("[1, 2]") == {"text": "[1, 2]"}

    def test_only_parseable_fields_unwrapped(self):
        result = normalize_result({"x": '{"y":2}', "z": "plain"})
        assert result == {"x": {"y": 2}, "z": "plain"}

    def test_nested_string_inside_json_string(self):
        raw = '{"clips": "[{\\"clip_id\\": \\"c1\\"}]", "processing_summary": "done"}'
        result = normalize_result(raw)
        assert result["clips"] == [{"clip_id": "c1"}]
        assert result["processing_summary"] == "done"

    def test_numeric_string_field_decoded(self):
        assert normalize_result({"total_clips_generated": "3"}) == {"total_clips_generated": 3}

    def test_input_mapping_not_mutated(self):
        original = {"x": '{"y": 2}'}
        normalize_result(original)
        assert original == {"x": '{"y": 2}'}

    def test_idempotent(self):
        values = [
            None,
            "hello",
            '{"a": "{\\"b\\": 1}"}',
            {"x": '{"y":2}', "z": "plain", "n": '"quoted"'},
        ]
        for value in values:
            once = normalize_result(value)
            assert normalize_result(once) == once

    def test_malformed_json_field_left_alone(self):
        assert normalize_result({"x": '{"y": '}) == {"x": '{"y": '}

    def test_bytes(self):
        assert normalize_result(b'{"a": 1}') == {"a": 1}

    def test_unexpected_type(self):
        assert normalize_result(42) == {}
        assert normalize_result([1, 2]) == {}


class TestDecodePayload:
    def test_text_is_unparsed(self):
        assert decode_payload("not json") == Unparsed("not json")

    def test_mapping_is_structured(self):
        assert decode_payload({"a": 1}) == Structured({"a": 1})

    def test_falsy_is_empty_structured(self):
        assert decode_payload(None) == Structured()
