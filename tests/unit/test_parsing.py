"""Unit tests for model response parsing."""

import pytest

from lingua.errors import MalformedResponseError
from lingua.parsing import parse_ai_response, parse_model_json, strip_code_fences


@pytest.mark.unit
def test_fenced_json() -> None:
    assert parse_model_json('```json\n{"score":7}\n```') == {"score": 7}


@pytest.mark.unit
def test_bare_json() -> None:
    assert parse_model_json('{"score":7}') == {"score": 7}


@pytest.mark.unit
def test_bare_fence_and_whitespace() -> None:
    assert parse_model_json('  ```\n{"score": 7}\n```  \n') == {"score": 7}


@pytest.mark.unit
def test_strip_code_fences_leaves_plain_text() -> None:
    assert strip_code_fences("  plain  ") == "plain"


@pytest.mark.unit
def test_not_json_raises() -> None:
    with pytest.raises(MalformedResponseError, match="Malformed"):
        parse_model_json("not json")


@pytest.mark.unit
def test_top_level_array_raises() -> None:
    with pytest.raises(MalformedResponseError, match="JSON object"):
        parse_model_json("[1, 2]")


@pytest.mark.unit
def test_parse_ai_response_full_shape() -> None:
    raw = """```json
{
  "score": 6.5,
  "scoreBreakdown": {"Grammar": 5, "Vocabulary": 7},
  "feedback": "Good effort.",
  "detailedErrors": [
    {"original": "has", "correction": "have", "explanation": "Subject-verb agreement", "type": "grammar"},
    {"original": "a apple", "correction": "an apple", "explanation": "Article before vowel", "type": "grammar"}
  ],
  "improvedVersion": "I have an apple."
}
```"""
    result = parse_ai_response(raw)

    assert result.score == 6.5
    assert result.scoreBreakdown == {"Grammar": 5.0, "Vocabulary": 7.0}
    assert [e.original for e in result.detailedErrors] == ["has", "a apple"]
    assert result.improvedVersion == "I have an apple."
    assert result.transcription is None


@pytest.mark.unit
def test_parse_ai_response_defaults_optional_fields() -> None:
    result = parse_ai_response('{"score": 3}')
    assert result.feedback == ""
    assert result.detailedErrors == []
    assert result.scoreBreakdown is None


@pytest.mark.unit
def test_parse_ai_response_missing_score_raises() -> None:
    with pytest.raises(MalformedResponseError, match="result shape"):
        parse_ai_response('{"feedback": "no score"}')


@pytest.mark.unit
def test_parse_ai_response_normalizes_error_types() -> None:
    raw = """{"score": 1, "detailedErrors": [
        {"original": "x", "type": "Grammar"},
        {"original": "y", "type": " VOCABULARY "},
        {"original": "z", "type": "spelling"},
        {"original": "w"}
    ]}"""

    result = parse_ai_response(raw)

    assert [e.type for e in result.detailedErrors] == ["grammar", "vocabulary", "grammar", "grammar"]
    assert [e.original for e in result.detailedErrors] == ["x", "y", "z", "w"]


@pytest.mark.unit
def test_backticks_inside_json_strings_are_kept() -> None:
    raw = '```json\n{"score": 5, "improvedVersion": "Use ```code``` blocks"}\n```'

    assert parse_model_json(raw) == {"score": 5, "improvedVersion": "Use ```code``` blocks"}


@pytest.mark.unit
def test_inner_fence_with_language_tag_is_kept() -> None:
    raw = '{"feedback": "see ```python\\nprint(1)\\n```"}'

    assert parse_model_json(raw)["feedback"] == "see ```python\nprint(1)\n```"
