from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from formwave.schema.field_schema import Field, FieldType


class FormType(str, Enum):
    SURVEY = "survey"
    REGISTRATION = "registration"
    CONTACT = "contact"
    QUIZ = "quiz"
    OTHER = "other"


class QuestionType(str, Enum):
    TEXT = "text"
    MULTIPLE_CHOICE = "multiple_choice"


class FormDetails(BaseModel):
    """Form metadata entered on the details step"""
    title: str = ""
    description: Optional[str] = ""
    type: FormType = FormType.SURVEY


class FormCreate(FormDetails):
    fields: List[Field] = []


class QuestionDraft(BaseModel):
    """A question as held by the edit page, before it is saved"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: QuestionType
    title: str = ""
    required: bool = False
    options: Optional[List[str]] = None
    is_new: bool = PydanticField(default=False, alias="isNew")
    field_type: Optional[FieldType] = None
    settings: Optional[Dict[str, Any]] = None


class FormUpdate(FormDetails):
    questions: List[QuestionDraft] = []
    expected_version: Optional[int] = None


class QuestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    form_id: str
    title: str
    type: QuestionType
    required: bool
    options: List[str] = []
    position: int
    field_type: Optional[str] = None
    settings: Dict[str, Any] = {}


class FormResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    type: str
    version: int
    created_at: datetime


class FormWithQuestions(FormResponse):
    questions: List[QuestionResponse] = []


class FormListItem(FormResponse):
    response_count: int = 0
    share_url: str


class PublicForm(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    questions: List[QuestionResponse] = []


class SubmissionCreate(BaseModel):
    """Answers keyed by question id: a string for text, a list for choices"""
    answers: Dict[str, Union[str, List[str]]] = {}


class ResultsView(str, Enum):
    SUMMARY = "summary"
    RESPONSES = "responses"
