import json

import pytest

from hiredready.ai.parsing import extract_json_span, parse_json_response, parse_model, parse_model_list
from hiredready.errors import UpstreamFormatError
from hiredready.schemas import CatalogQuestionDraft, CodeReview, QuizQuestion


def test_fenced_json_is_parsed():
    raw = '```json\n{"title": "Reverse Words", "prompt": "..."}\n```'
    assert parse_json_response(raw) == {"title": "Reverse Words", "prompt": "..."}


def test_prose_around_object_is_tolerated():
    raw = 'Sure! Here is your question:\n{"feedbackMarkdown": "ok", "isCorrect": true}\nGood luck.'
    review = parse_model(raw, CodeReview)
    assert review.feedback_markdown == "ok"
    assert review.is_correct is True


def test_array_span_is_extracted():
    assert extract_json_span('Quiz: [{"a": 1}] done', "[") == '[{"a": 1}]'
    assert extract_json_span("no json here", "{") is None


def test_fences_inside_string_values_survive():
    markdown = "Use this:\n```javascript\nreturn s.split('').reverse().join('');\n```"
    raw = "```json\n" + json.dumps({"feedbackMarkdown": markdown, "isCorrect": True}) + "\n```"
    review = parse_model(raw, CodeReview)
    assert review.feedback_markdown == markdown

    unwrapped = json.dumps({"feedbackMarkdown": markdown, "isCorrect": False})
    assert parse_model(unwrapped, CodeReview).feedback_markdown == markdown

    in_prose = "Here you go:\n```json\n" + unwrapped + "\n```\nHope that helps."
    assert parse_model(in_prose, CodeReview).feedback_markdown == markdown


def test_brackets_in_prose_before_an_object():
    assert parse_json_response('Result [v1]: {"a": 1}') == {"a": 1}
    review = parse_model('Review [draft]: {"feedbackMarkdown": "ok", "isCorrect": false}', CodeReview)
    assert review.is_correct is False


def test_list_reply_with_braces_in_prose():
    raw = 'Format {question, options}: [{"question": "Q", "options": ["A", "B", "C", "D"], "correctAnswer": "A"}]'
    assert len(parse_model_list(raw, QuizQuestion)) == 1


@pytest.mark.parametrize("raw", ["", "   ", "not json", "{broken", "{\"a\": }"])
def test_unusable_text_raises_format_error(raw):
    with pytest.raises(UpstreamFormatError):
        parse_json_response(raw)


def test_missing_required_field_is_a_format_error():
    with pytest.raises(UpstreamFormatError) as exc:
        parse_model('{"feedbackMarkdown": "looks fine"}', CodeReview)
    assert "isCorrect" in str(exc.value)


def test_catalog_draft_needs_test_cases():
    raw = '{"title": "T", "description": "D", "testCases": []}'
    with pytest.raises(UpstreamFormatError):
        parse_model(raw, CatalogQuestionDraft)


def test_catalog_draft_coerces_structured_values_to_text():
    raw = """{
      "title": "Two Sum",
      "description": "Find the pair.",
      "constraints": ["1 <= n <= 10^4", "values fit in int32"],
      "examples": [{"input": [2, 7, 11], "output": [0, 1]}],
      "testCases": [{"input": [[2, 7, 11], 9], "expectedOutput": [0, 1], "isHidden": true}]
    }"""
    draft = parse_model(raw, CatalogQuestionDraft)
    assert draft.constraints == "1 <= n <= 10^4\nvalues fit in int32"
    assert draft.examples[0].input == "[2, 7, 11]"
    assert draft.examples[0].explanation == ""
    case = draft.test_cases[0]
    assert case.input == "[[2, 7, 11], 9]"
    assert case.expected_output == "[0, 1]"
    assert case.model_dump(by_alias=True) == {
        "input": "[[2, 7, 11], 9]", "expectedOutput": "[0, 1]", "isHidden": True,
    }


def test_quiz_answer_must_be_an_option():
    good = '[{"question": "Q", "options": ["A", "B", "C", "D"], "correctAnswer": "C"}]'
    assert parse_model_list(good, QuizQuestion)[0].correct_answer == "C"

    bad_answer = '[{"question": "Q", "options": ["A", "B", "C", "D"], "correctAnswer": "E"}]'
    with pytest.raises(UpstreamFormatError):
        parse_model_list(bad_answer, QuizQuestion)

    three_options = '[{"question": "Q", "options": ["A", "B", "C"], "correctAnswer": "A"}]'
    with pytest.raises(UpstreamFormatError):
        parse_model_list(three_options, QuizQuestion)
