"""Builder-time field vocabulary.

A ``Field`` is what the form builder works with: a typed, labelled input with
presentation settings. At publish time it is collapsed into a persisted
question (see ``formwave.services.form_publisher``).
"""
import uuid
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field as PydanticField, model_validator


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    EMAIL = "email"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DATE = "date"


CHOICE_FIELD_TYPES = frozenset({FieldType.SELECT, FieldType.CHECKBOX, FieldType.RADIO})

DEFAULT_OPTIONS = ["Option 1", "Option 2", "Option 3"]

# Palette shown next to the canvas, in display order
FIELD_PALETTE: Tuple[Tuple[FieldType, str], ...] = (
    (FieldType.TEXT, "Text Input"),
    (FieldType.TEXTAREA, "Text Area"),
    (FieldType.NUMBER, "Number"),
    (FieldType.EMAIL, "Email"),
    (FieldType.SELECT, "Dropdown"),
    (FieldType.CHECKBOX, "Checkboxes"),
    (FieldType.RADIO, "Radio Buttons"),
    (FieldType.DATE, "Date"),
)


class FontSize(str, Enum):
    SM = "sm"
    BASE = "base"
    LG = "lg"


class FieldWidth(str, Enum):
    FULL = "full"
    THREE_QUARTERS = "3/4"
    HALF = "1/2"


def default_label(field_type: FieldType) -> str:
    name = FieldType(field_type).value
    return f"New {name[:1].upper()}{name[1:]}"


def is_choice_type(field_type) -> bool:
    return FieldType(field_type) in CHOICE_FIELD_TYPES


class FieldStyles(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    text_color: Optional[str] = PydanticField(default=None, alias="textColor")
    background_color: Optional[str] = PydanticField(default=None, alias="backgroundColor")
    border_color: Optional[str] = PydanticField(default=None, alias="borderColor")
    font_size: FontSize = PydanticField(default=FontSize.BASE, alias="fontSize")
    width: FieldWidth = FieldWidth.FULL


class Field(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = PydanticField(default_factory=lambda: str(uuid.uuid4()))
    type: FieldType
    label: str
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    default_value: Optional[str] = PydanticField(default=None, alias="defaultValue")
    help_text: Optional[str] = PydanticField(default=None, alias="helpText")
    styles: FieldStyles = PydanticField(default_factory=FieldStyles)

    @model_validator(mode="before")
    @classmethod
    def _options_follow_type(cls, data):
        # Options exist exactly when the type is choice-like
        if not isinstance(data, dict) or "type" not in data:
            return data
        data = dict(data)
        if is_choice_type(data["type"]):
            if data.get("options") is None:
                data["options"] = list(DEFAULT_OPTIONS)
            elif len(data["options"]) == 0:
                raise ValueError("Choice fields need at least one option")
        else:
            data["options"] = None
        return data

    def to_settings(self) -> dict:
        """Presentation data persisted alongside the question"""
        return {
            "placeholder": self.placeholder,
            "helpText": self.help_text,
            "defaultValue": self.default_value,
            "styles": self.styles.model_dump(by_alias=True),
        }
