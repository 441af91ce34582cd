"""Conversion between answer values and the ``answers.value`` column.

Text answers are stored verbatim. Multiple choice answers are stored as a JSON
array of the selected option strings, e.g. ``["Red","Blue"]``. This module is
the only place that reads or writes that encoding.
"""
import json
from dataclasses import dataclass
from typing import Iterable, Tuple, Union

from formwave.schema.form_schema import QuestionType


class MalformedAnswerError(ValueError):
    pass


@dataclass(frozen=True)
class TextAnswer:
    text: str

    def display(self) -> str:
        return self.text

    def is_empty(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class ChoicesAnswer:
    choices: Tuple[str, ...]

    @classmethod
    def of(cls, choices: Iterable[str]) -> "ChoicesAnswer":
        # Keep selection order, drop repeats
        return cls(tuple(dict.fromkeys(choices)))

    def display(self) -> str:
        return ", ".join(self.choices)

    def is_empty(self) -> bool:
        return len(self.choices) == 0


AnswerValue = Union[TextAnswer, ChoicesAnswer]


def encode_answer(answer: AnswerValue) -> str:
    if isinstance(answer, ChoicesAnswer):
        return json.dumps(list(answer.choices), separators=(",", ":"), ensure_ascii=False)
    return answer.text


def decode_answer(question_type, value: str) -> AnswerValue:
    """Read a stored value back into its tagged form.

    Raises MalformedAnswerError when a multiple choice value is not a JSON
    array of strings.
    """
    if QuestionType(question_type) is not QuestionType.MULTIPLE_CHOICE:
        return TextAnswer(value)

    try:
        parsed = json.loads(value)
    except (TypeError, ValueError) as e:
        raise MalformedAnswerError(f"Invalid JSON in choice answer: {value!r}") from e

    if not isinstance(parsed, list):
        raise MalformedAnswerError(f"Choice answer is not an array: {value!r}")

    return ChoicesAnswer(tuple(str(choice) for choice in parsed))


def answer_from_input(question_type, raw: Union[str, list, None]) -> AnswerValue:
    """Build the tagged answer for a value posted by a respondent"""
    if QuestionType(question_type) is QuestionType.MULTIPLE_CHOICE:
        if raw is None or raw == "":
            return ChoicesAnswer(())
        if isinstance(raw, str):
            return ChoicesAnswer((raw,))
        return ChoicesAnswer.of(raw)

    if isinstance(raw, list):
        return TextAnswer(", ".join(raw))
    return TextAnswer(raw or "")
