"""Turns builder fields or edit-page questions into form and question rows."""
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from formwave.constants.error import ERROR
from formwave.exceptions import CustomException, FormValidationError
from formwave.schema.field_schema import Field, FieldType
from formwave.schema.form_schema import FormDetails, QuestionDraft, QuestionType
from formwave.schema.user_schema import RequestContext
from formwave.services.table_store import StoreError, TableStore
from formwave.utils.logger_utils import handle_service_error, log_info, log_warning

logger = logging.getLogger(__name__)

FIELD_TO_QUESTION_TYPE: Dict[FieldType, QuestionType] = {
    FieldType.TEXT: QuestionType.TEXT,
    FieldType.TEXTAREA: QuestionType.TEXT,
    FieldType.NUMBER: QuestionType.TEXT,
    FieldType.EMAIL: QuestionType.TEXT,
    FieldType.DATE: QuestionType.TEXT,
    FieldType.SELECT: QuestionType.MULTIPLE_CHOICE,
    FieldType.CHECKBOX: QuestionType.MULTIPLE_CHOICE,
    FieldType.RADIO: QuestionType.MULTIPLE_CHOICE,
}

# Field types whose name does not survive the mapping; field_type keeps it
LOSSY_FIELD_TYPES = frozenset(
    field_type for field_type, question_type in FIELD_TO_QUESTION_TYPE.items()
    if field_type.value != question_type.value
)

# Keeps "id not in (...)" from matching every row when nothing remains
SENTINEL_QUESTION_ID = "dummy-id"


def question_type_for(field_type) -> QuestionType:
    return FIELD_TO_QUESTION_TYPE[FieldType(field_type)]


def _error(field: str, message: str) -> Dict[str, str]:
    return {"field": field, "message": message}


def validate_new_form(details: FormDetails, fields: Sequence[Field]) -> None:
    if not details.title.strip():
        raise FormValidationError([_error("title", ERROR.FORM_TITLE_REQUIRED)])
    if len(fields) == 0:
        raise FormValidationError([_error("fields", ERROR.FORM_FIELDS_REQUIRED)])


def validate_form_edit(details: FormDetails, questions: Sequence[QuestionDraft]) -> None:
    errors = []
    if not details.title.strip():
        errors.append(_error("title", ERROR.FORM_TITLE_REQUIRED))
    if len(questions) == 0:
        errors.append(_error("questions", ERROR.FORM_QUESTIONS_REQUIRED))

    for index, question in enumerate(questions):
        if not question.title.strip():
            errors.append(_error(f"questions.{index}.title", ERROR.QUESTION_TITLE_REQUIRED))
        if question.type == QuestionType.MULTIPLE_CHOICE and len(question.options or []) < 2:
            errors.append(_error(f"questions.{index}.options", ERROR.QUESTION_OPTIONS_REQUIRED))

    if errors:
        raise FormValidationError(errors)


def field_to_question_row(field: Field, form_id: str, position: int) -> dict:
    return {
        "form_id": form_id,
        "title": field.label,
        "type": question_type_for(field.type).value,
        "required": field.required,
        "options": list(field.options or []),
        "position": position,
        "field_type": FieldType(field.type).value,
        "settings": field.to_settings(),
    }


def fields_to_drafts(fields: Iterable[Field], persisted_ids: Iterable[str]) -> List[QuestionDraft]:
    """Questions for update_form from a builder opened on an existing form"""
    persisted = set(persisted_ids)
    return [
        QuestionDraft(
            id=field.id,
            type=question_type_for(field.type),
            title=field.label,
            required=field.required,
            options=list(field.options or []),
            is_new=field.id not in persisted,
            field_type=FieldType(field.type),
            settings=field.to_settings(),
        )
        for field in fields
    ]


def _draft_values(question: QuestionDraft) -> dict:
    values = {
        "title": question.title,
        "type": question.type.value,
        "required": question.required,
        "options": list(question.options or []),
    }
    if question.field_type is not None:
        values["field_type"] = question.field_type.value
    if question.settings is not None:
        values["settings"] = question.settings
    return values


class FormPublisher:
    def __init__(self, store: TableStore):
        self.store = store

    def create_form(self, context: RequestContext, details: FormDetails, fields: Sequence[Field]) -> dict:
        validate_new_form(details, fields)

        try:
            form = self.store.insert("forms", [{
                "title": details.title,
                "description": details.description,
                "type": details.type.value,
                "user_id": context.caller_id,
                "settings": {},
                "version": 1,
            }])[0]

            # No rollback: the form row stays if this insert fails
            self.store.insert("questions", [
                field_to_question_row(field, form["id"], position)
                for position, field in enumerate(fields)
            ])
        except StoreError as e:
            handle_service_error(
                error=e,
                context="create_form",
                custom_exception=CustomException(status_code=500, message=ERROR.FORM_CREATE_FAILED),
            )

        log_info(context="FORM_PUBLISHER", message=f"Form {form['id']} created with {len(fields)} questions")
        lossy = sorted({FieldType(field.type) for field in fields} & LOSSY_FIELD_TYPES, key=lambda t: t.value)
        if lossy:
            logger.debug(
                f"Form {form['id']}: {', '.join(t.value for t in lossy)} kept only in question field_type"
            )
        return form

    def load_owned_form(self, context: RequestContext, form_id: str, forbidden_message: str) -> dict:
        try:
            return self.store.select(
                "forms",
                eq={"id": form_id, "user_id": context.caller_id},
                single=True,
            )
        except StoreError as e:
            if e.is_not_found:
                raise CustomException(status_code=404, message=forbidden_message)
            handle_service_error(
                error=e,
                context="load_owned_form",
                custom_exception=CustomException(status_code=500, message=ERROR.FORM_LOAD_FAILED),
            )

    def update_form(
        self,
        context: RequestContext,
        form_id: str,
        details: FormDetails,
        questions: Sequence[QuestionDraft],
        expected_version: Optional[int] = None,
    ) -> dict:
        validate_form_edit(details, questions)

        form = self.load_owned_form(context, form_id, ERROR.FORM_EDIT_FORBIDDEN)
        if expected_version is not None and form["version"] != expected_version:
            raise CustomException(status_code=409, message=ERROR.FORM_VERSION_CONFLICT)

        existing = [question for question in questions if not question.is_new]
        new = [question for question in questions if question.is_new]
        remaining_ids = [question.id for question in existing]

        try:
            # Compare-and-swap on version: only one edit of a given version lands
            swapped = self.store.update(
                "forms",
                {
                    "title": details.title,
                    "description": details.description,
                    "type": details.type.value,
                    "version": form["version"] + 1,
                },
                eq={"id": form_id, "version": form["version"]},
            )
            if swapped != 1:
                log_warning(context="FORM_PUBLISHER", message=f"Form {form_id} changed since version {form['version']}")
                raise CustomException(status_code=409, message=ERROR.FORM_VERSION_CONFLICT)

            self.store.delete(
                "questions",
                eq={"form_id": form_id},
                not_in=("id", remaining_ids or [SENTINEL_QUESTION_ID]),
            )

            # Kept questions are numbered 0..k-1 among themselves and new ones continue
            # at k, so positions stay unique within the form
            for position, question in enumerate(existing):
                self.store.update(
                    "questions",
                    {**_draft_values(question), "position": position},
                    eq={"id": question.id, "form_id": form_id},
                )

            self.store.insert("questions", [
                {**_draft_values(question), "form_id": form_id, "position": len(existing) + offset}
                for offset, question in enumerate(new)
            ])
        except StoreError as e:
            handle_service_error(
                error=e,
                context="update_form",
                custom_exception=CustomException(status_code=500, message=ERROR.FORM_UPDATE_FAILED),
            )

        log_info(
            context="FORM_PUBLISHER",
            message=f"Form {form_id} updated: {len(existing)} kept, {len(new)} added",
        )
        return {**form, "title": details.title, "description": details.description,
                "type": details.type.value, "version": form["version"] + 1}

    def update_form_fields(
        self,
        context: RequestContext,
        form_id: str,
        details: FormDetails,
        fields: Sequence[Field],
        expected_version: Optional[int] = None,
    ) -> dict:
        """Save a builder session that was opened on an existing form"""
        validate_new_form(details, fields)
        self.load_owned_form(context, form_id, ERROR.FORM_EDIT_FORBIDDEN)
        try:
            persisted = self.store.select("questions", eq={"form_id": form_id})
        except StoreError as e:
            handle_service_error(
                error=e,
                context="update_form_fields",
                custom_exception=CustomException(status_code=500, message=ERROR.FORM_UPDATE_FAILED),
            )
        drafts = fields_to_drafts(fields, [row["id"] for row in persisted])
        return self.update_form(context, form_id, details, drafts, expected_version=expected_version)
