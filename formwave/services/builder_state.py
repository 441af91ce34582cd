"""Ordered list of fields for the form being authored.

All mutations are in memory; nothing reaches the store until ``save``.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from formwave.constants.error import ERROR
from formwave.exceptions import CustomException
from formwave.schema.field_schema import DEFAULT_OPTIONS, Field, FieldStyles, FieldType, default_label, is_choice_type
from formwave.services.field_editor import FieldEditor
from formwave.utils.logger_utils import log_warning

logger = logging.getLogger(__name__)


class BuilderState:
    def __init__(self, fields: Optional[Iterable[Field]] = None):
        self.fields: List[Field] = list(fields or [])
        self.selected_field_id: Optional[str] = None
        self.is_editor_open = False

    @classmethod
    def from_questions(cls, questions: Iterable[Dict[str, Any]]) -> "BuilderState":
        """Rebuild builder fields from persisted question rows"""
        fields = []
        for question in questions:
            settings = question.get("settings") or {}
            field_type = question.get("field_type")
            if not field_type:
                field_type = FieldType.CHECKBOX if question["type"] == "multiple_choice" else FieldType.TEXT

            options = None
            if is_choice_type(field_type):
                options = question.get("options") or None
                if options is None:
                    log_warning(
                        context="BUILDER",
                        message=f"Question {question['id']} has no options; reopened with the default options",
                    )

            fields.append(Field(
                id=question["id"],
                type=field_type,
                label=question["title"],
                required=bool(question.get("required")),
                options=options,
                placeholder=settings.get("placeholder"),
                help_text=settings.get("helpText"),
                default_value=settings.get("defaultValue"),
                styles=FieldStyles.model_validate(settings.get("styles") or {}),
            ))
        return cls(fields)

    @property
    def selected_field(self) -> Optional[Field]:
        return self._find(self.selected_field_id) if self.selected_field_id else None

    def _find(self, field_id: str) -> Optional[Field]:
        return next((field for field in self.fields if field.id == field_id), None)

    def _index(self, field_id: str) -> int:
        for index, field in enumerate(self.fields):
            if field.id == field_id:
                return index
        return -1

    def add_field(self, field_type) -> Field:
        field_type = FieldType(field_type)
        field = Field(
            type=field_type,
            label=default_label(field_type),
            required=False,
            options=list(DEFAULT_OPTIONS) if is_choice_type(field_type) else None,
            styles=FieldStyles(font_size="base", width="full"),
        )
        self.fields.append(field)
        self.selected_field_id = field.id
        self.is_editor_open = True
        return field

    def reorder(self, source_index: int, destination_index: Optional[int]) -> None:
        # A drag dropped outside the canvas has no destination
        if destination_index is None or source_index == destination_index:
            return
        if not 0 <= source_index < len(self.fields) or not 0 <= destination_index < len(self.fields):
            raise CustomException(status_code=400, message=ERROR.BUILDER_INVALID_INDEX)

        moved = self.fields.pop(source_index)
        self.fields.insert(destination_index, moved)

    def update_field(self, field_id: str, changes: Dict[str, Any]) -> Optional[Field]:
        index = self._index(field_id)
        if index < 0:
            return None

        merged = {**self.fields[index].model_dump(), **changes, "id": field_id}
        try:
            updated = Field.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Rejected update for field {field_id}: {e.errors()}")
            raise CustomException(status_code=400, message=e.errors()[0]["msg"])

        self.fields[index] = updated
        return updated

    def delete_field(self, field_id: str) -> None:
        self.fields = [field for field in self.fields if field.id != field_id]
        if self.selected_field_id == field_id:
            self.selected_field_id = None
            self.is_editor_open = False

    def select_field(self, field_id: str) -> Field:
        field = self._find(field_id)
        if field is None:
            raise CustomException(status_code=404, message=ERROR.BUILDER_FIELD_NOT_FOUND)
        self.selected_field_id = field_id
        self.is_editor_open = True
        return field

    def close_editor(self) -> None:
        self.is_editor_open = False

    def editor(self) -> Optional[FieldEditor]:
        field = self.selected_field
        if field is None or not self.is_editor_open:
            return None
        return FieldEditor(field, self.update_field)

    def save(self, publisher, context, details, form_id: Optional[str] = None, **kwargs):
        """Hand the current fields to the publisher"""
        if form_id is None:
            return publisher.create_form(context, details, list(self.fields))
        return publisher.update_form_fields(context, form_id, details, list(self.fields), **kwargs)
