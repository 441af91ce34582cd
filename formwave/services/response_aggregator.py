"""Per-question tallies and per-submission transcripts for the results page."""
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from formwave.schema.form_schema import QuestionType
from formwave.utils.answer_codec import ChoicesAnswer, MalformedAnswerError, decode_answer
from formwave.utils.logger_utils import log_warning

logger = logging.getLogger(__name__)

NO_ANSWER = "No answer"


@dataclass
class QuestionSummary:
    question_id: str
    title: str
    type: str
    options: Optional[List[str]] = None
    answers: Dict[str, int] = field(default_factory=dict)
    total: int = 0

    def to_dict(self) -> dict:
        data = {
            "questionId": self.question_id,
            "title": self.title,
            "type": self.type,
            "options": self.options,
            "answers": dict(self.answers),
            "total": self.total,
        }
        if self.type == QuestionType.MULTIPLE_CHOICE.value:
            data["breakdown"] = option_breakdown(self)
        return data


def percentage(count: int, total: int) -> int:
    """Whole percent, halves rounded up; 0 when there is nothing to divide by"""
    if total <= 0:
        return 0
    return int(math.floor(100 * count / total + 0.5))


def option_breakdown(summary: QuestionSummary) -> List[dict]:
    return [
        {
            "option": option,
            "count": summary.answers.get(option, 0),
            "percentage": percentage(summary.answers.get(option, 0), summary.total),
        }
        for option in summary.options or []
    ]


def _answers_by_question(answers: Iterable[dict]) -> Dict[str, List[dict]]:
    index = defaultdict(list)
    for answer in answers:
        index[answer["question_id"]].append(answer)
    return index


def summarize_questions(questions: Iterable[dict], answers: Iterable[dict]) -> List[QuestionSummary]:
    by_question = _answers_by_question(answers)
    summaries = []

    for question in questions:
        is_choice = question["type"] == QuestionType.MULTIPLE_CHOICE.value
        summary = QuestionSummary(
            question_id=question["id"],
            title=question["title"],
            type=question["type"],
            options=list(question.get("options") or []) if is_choice else None,
        )

        for answer in by_question.get(question["id"], []):
            try:
                value = decode_answer(question["type"], answer["value"])
            except MalformedAnswerError as e:
                log_warning(context="RESULTS", message=f"Skipping answer for question {question['id']}: {e}")
                continue

            if isinstance(value, ChoicesAnswer):
                for choice in value.choices:
                    summary.answers[choice] = summary.answers.get(choice, 0) + 1
            else:
                summary.answers[value.text] = summary.answers.get(value.text, 0) + 1
            summary.total += 1

        summaries.append(summary)

    return summaries


def display_value(question: dict, answer: Optional[dict]) -> str:
    if answer is None:
        return NO_ANSWER
    try:
        return decode_answer(question["type"], answer["value"]).display()
    except MalformedAnswerError:
        logger.debug(f"Showing raw value for malformed answer to {question['id']}")
        return answer["value"]


def build_transcripts(questions: List[dict], submissions: Iterable[dict], answers: Iterable[dict]) -> List[dict]:
    by_submission: Dict[str, Dict[str, dict]] = defaultdict(dict)
    for answer in answers:
        by_submission[answer["submission_id"]][answer["question_id"]] = answer

    transcripts = []
    for submission in submissions:
        submission_answers = by_submission.get(submission["id"], {})
        transcripts.append({
            "id": submission["id"],
            "submitted_at": submission["submitted_at"],
            "answers": [
                {
                    "questionId": question["id"],
                    "title": question["title"],
                    "value": display_value(question, submission_answers.get(question["id"])),
                }
                for question in questions
            ],
        })
    return transcripts
