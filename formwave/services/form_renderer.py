"""Public fill-out flow for a published form.

    loading -> error | ready
    ready -> submitting -> submitted | ready (with errors)
"""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Union

from formwave.constants.error import ERROR
from formwave.exceptions import CustomException
from formwave.schema.form_schema import QuestionType
from formwave.services.table_store import StoreError, TableStore
from formwave.utils.answer_codec import answer_from_input, encode_answer
from formwave.utils.logger_utils import log_info

logger = logging.getLogger(__name__)


class RendererState(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class PublicFormRenderer:
    def __init__(self, store: TableStore, form_id: str):
        self.store = store
        self.form_id = form_id
        self.state = RendererState.LOADING
        self.form: Optional[dict] = None
        self.questions: List[dict] = []
        self.answers: Dict[str, Union[str, List[str]]] = {}
        self.errors: Dict[str, str] = {}
        self.form_error: Optional[str] = None
        self.submission_id: Optional[str] = None

    def load(self) -> RendererState:
        try:
            self.form = self.store.select("forms", eq={"id": self.form_id}, single=True)
            self.questions = self.store.select(
                "questions", eq={"form_id": self.form_id}, order_by="position"
            )
        except StoreError as e:
            logger.error(f"Error fetching form {self.form_id}: {e}")
            self.form_error = ERROR.FORM_UNAVAILABLE
            self.state = RendererState.ERROR
            return self.state

        self.answers = {
            question["id"]: [] if question["type"] == QuestionType.MULTIPLE_CHOICE.value else ""
            for question in self.questions
        }
        self.state = RendererState.READY
        return self.state

    def _question(self, question_id: str) -> Optional[dict]:
        return next((q for q in self.questions if q["id"] == question_id), None)

    def _touch(self, question_id: str) -> None:
        # Editing an answer clears its error
        self.errors.pop(question_id, None)

    def set_text(self, question_id: str, value: str) -> None:
        if question_id not in self.answers:
            return
        self.answers[question_id] = value
        self._touch(question_id)

    def toggle_choice(self, question_id: str, option: str, checked: bool) -> None:
        current = self.answers.get(question_id)
        if not isinstance(current, list):
            return
        if checked and option not in current:
            self.answers[question_id] = current + [option]
        elif not checked:
            self.answers[question_id] = [item for item in current if item != option]
        self._touch(question_id)

    def choose(self, question_id: str, option: str) -> None:
        """Single selection, as for radio buttons and dropdowns"""
        if not isinstance(self.answers.get(question_id), list):
            return
        self.answers[question_id] = [option]
        self._touch(question_id)

    def fill(self, answers: Dict[str, Union[str, List[str]]]) -> None:
        for question_id, value in answers.items():
            question = self._question(question_id)
            if question is None:
                continue
            if question["type"] == QuestionType.MULTIPLE_CHOICE.value:
                self.answers[question_id] = [] if value in (None, "") else (
                    [value] if isinstance(value, str) else list(value)
                )
            else:
                self.answers[question_id] = value if isinstance(value, str) else ", ".join(value)
            self._touch(question_id)

    def validate(self) -> bool:
        errors = {}
        for question in self.questions:
            if not question["required"]:
                continue
            answer = answer_from_input(question["type"], self.answers.get(question["id"]))
            if answer.is_empty():
                errors[question["id"]] = (
                    ERROR.SELECTION_REQUIRED
                    if question["type"] == QuestionType.MULTIPLE_CHOICE.value
                    else ERROR.FIELD_REQUIRED
                )
        self.errors = errors
        return not errors

    def submit(self) -> RendererState:
        if self.state is RendererState.SUBMITTING:
            raise CustomException(status_code=409, message=ERROR.SUBMIT_IN_PROGRESS)
        if self.state is not RendererState.READY:
            return self.state
        if not self.validate():
            return self.state

        self.state = RendererState.SUBMITTING
        self.form_error = None
        try:
            submission = self.store.insert("submissions", [{
                "form_id": self.form_id,
                "submitted_at": datetime.now(timezone.utc).replace(tzinfo=None),
            }])[0]
            self.store.insert("answers", [
                {
                    "submission_id": submission["id"],
                    "question_id": question["id"],
                    "value": encode_answer(
                        answer_from_input(question["type"], self.answers.get(question["id"]))
                    ),
                }
                for question in self.questions
            ])
        except StoreError as e:
            logger.error(f"Error submitting form {self.form_id}: {e}", exc_info=True)
            self.form_error = ERROR.SUBMIT_FAILED
            self.state = RendererState.READY
            return self.state

        self.submission_id = submission["id"]
        self.state = RendererState.SUBMITTED
        log_info(context="PUBLIC_FORM", message=f"Submission {self.submission_id} recorded for form {self.form_id}")
        return self.state
