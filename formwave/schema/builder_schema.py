from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from formwave.schema.field_schema import Field, FieldStyles, FieldType, FieldWidth, FontSize
from formwave.schema.form_schema import FormDetails


class BuilderSessionCreate(BaseModel):
    # Open the builder on an already published form instead of a blank canvas
    form_id: Optional[str] = None


class AddFieldRequest(BaseModel):
    type: FieldType


class ReorderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_index: int = PydanticField(alias="sourceIndex")
    # None when the drag ended outside any drop target
    destination_index: Optional[int] = PydanticField(default=None, alias="destinationIndex")


class FieldUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Optional[FieldType] = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: Optional[bool] = None
    options: Optional[List[str]] = None
    default_value: Optional[str] = PydanticField(default=None, alias="defaultValue")
    help_text: Optional[str] = PydanticField(default=None, alias="helpText")
    styles: Optional[FieldStyles] = None


class EditorUpdate(BaseModel):
    """Property and style edits for the selected field"""
    model_config = ConfigDict(populate_by_name=True)

    label: Optional[str] = None
    placeholder: Optional[str] = None
    help_text: Optional[str] = PydanticField(default=None, alias="helpText")
    default_value: Optional[str] = PydanticField(default=None, alias="defaultValue")
    required: Optional[bool] = None
    width: Optional[FieldWidth] = None
    font_size: Optional[FontSize] = PydanticField(default=None, alias="fontSize")
    text_color: Optional[str] = PydanticField(default=None, alias="textColor")
    background_color: Optional[str] = PydanticField(default=None, alias="backgroundColor")
    border_color: Optional[str] = PydanticField(default=None, alias="borderColor")


class OptionText(BaseModel):
    text: str


class BuilderSaveRequest(FormDetails):
    expected_version: Optional[int] = None


class BuilderSessionResponse(BaseModel):
    id: str
    form_id: Optional[str] = None
    fields: List[Field] = []
    selected_field_id: Optional[str] = None
    is_editor_open: bool = False
    can_remove_option: bool = False
