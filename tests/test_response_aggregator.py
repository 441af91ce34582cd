from __future__ import annotations

from datetime import datetime

import pytest

from formwave.utils.answer_codec import (
    ChoicesAnswer, MalformedAnswerError, TextAnswer, answer_from_input, decode_answer, encode_answer
)
from formwave.services.response_aggregator import (
    NO_ANSWER, build_transcripts, option_breakdown, percentage, summarize_questions
)

COLOUR = {"id": "q-colour", "title": "Favourite colours", "type": "multiple_choice", "options": ["Red", "Blue", "Green"]}
FEEDBACK = {"id": "q-feedback", "title": "Feedback", "type": "text", "options": []}


def _answer(question, value, submission_id="s1"):
    return {"submission_id": submission_id, "question_id": question["id"], "value": value}


def test_choices_are_stored_as_compact_json_array():
    assert encode_answer(ChoicesAnswer.of(["Red", "Blue"])) == '["Red","Blue"]'
    assert encode_answer(TextAnswer("Great service")) == "Great service"


def test_decode_rejects_non_array_choice_values():
    with pytest.raises(MalformedAnswerError):
        decode_answer("multiple_choice", "{not json")
    with pytest.raises(MalformedAnswerError):
        decode_answer("multiple_choice", '"Red"')
    assert decode_answer("text", "{not json") == TextAnswer("{not json")


def test_answer_from_input_for_each_question_type():
    assert answer_from_input("multiple_choice", ["Red", "Red", "Blue"]) == ChoicesAnswer(("Red", "Blue"))
    assert answer_from_input("multiple_choice", None).is_empty()
    assert answer_from_input("text", "  ").is_empty()


def test_multiple_choice_selection_round_trips_into_counts():
    stored = encode_answer(answer_from_input("multiple_choice", ["Red", "Blue"]))

    [summary] = summarize_questions([COLOUR], [_answer(COLOUR, stored)])

    assert summary.answers == {"Red": 1, "Blue": 1}
    assert summary.total == 1


def test_text_answers_are_counted_by_value():
    answers = [
        _answer(FEEDBACK, "Great service", "s1"),
        _answer(FEEDBACK, "Great service", "s2"),
        _answer(FEEDBACK, "Slow delivery", "s3"),
    ]
    [summary] = summarize_questions([FEEDBACK], answers)

    assert summary.answers == {"Great service": 2, "Slow delivery": 1}
    assert summary.total == 3
    assert summary.options is None


def test_malformed_choice_value_is_skipped():
    answers = [
        _answer(COLOUR, '["Green"]', "s1"),
        _answer(COLOUR, "{not json", "s2"),
        _answer(COLOUR, '{"Red": true}', "s3"),
    ]
    [summary] = summarize_questions([COLOUR], answers)

    assert summary.answers == {"Green": 1}
    assert summary.total == 1


def test_questions_without_answers_have_empty_summary():
    summaries = summarize_questions([COLOUR, FEEDBACK], [])
    assert [(s.question_id, s.total, s.answers) for s in summaries] == [
        ("q-colour", 0, {}),
        ("q-feedback", 0, {}),
    ]


def test_percentage_rounds_and_guards_zero_total():
    assert percentage(3, 4) == 75
    assert percentage(0, 0) == 0
    assert percentage(1, 3) == 33
    assert percentage(1, 8) == 13


def test_option_breakdown_follows_declared_options():
    answers = [
        _answer(COLOUR, '["Red"]', "s1"),
        _answer(COLOUR, '["Red","Blue"]', "s2"),
        _answer(COLOUR, '["Red"]', "s3"),
        _answer(COLOUR, '["Blue"]', "s4"),
    ]
    [summary] = summarize_questions([COLOUR], answers)

    assert option_breakdown(summary) == [
        {"option": "Red", "count": 3, "percentage": 75},
        {"option": "Blue", "count": 2, "percentage": 50},
        {"option": "Green", "count": 0, "percentage": 0},
    ]
    assert summary.to_dict()["breakdown"][0]["option"] == "Red"


def test_transcripts_show_joined_choices_and_missing_answers():
    submissions = [
        {"id": "s1", "submitted_at": datetime(2024, 5, 1, 12, 0)},
        {"id": "s2", "submitted_at": datetime(2024, 5, 2, 12, 0)},
    ]
    answers = [
        _answer(COLOUR, '["Red","Blue"]', "s1"),
        _answer(FEEDBACK, "Lovely", "s1"),
        _answer(COLOUR, "{not json", "s2"),
    ]

    first, second = build_transcripts([COLOUR, FEEDBACK], submissions, answers)

    assert [a["value"] for a in first["answers"]] == ["Red, Blue", "Lovely"]
    assert [a["value"] for a in second["answers"]] == ["{not json", NO_ANSWER]
