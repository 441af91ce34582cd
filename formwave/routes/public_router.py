from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from formwave.config.database_config import get_db
from formwave.constants.messages import MESSAGE
from formwave.exceptions import CustomException, FormValidationError
from formwave.schema.form_schema import PublicForm, QuestionResponse, SubmissionCreate
from formwave.services.form_renderer import PublicFormRenderer, RendererState
from formwave.services.table_store import TableStore
from formwave.utils.logger_utils import handle_route_error

public_controller = APIRouter()


def _load(db: Session, form_id: str) -> PublicFormRenderer:
    renderer = PublicFormRenderer(TableStore(db), form_id)
    if renderer.load() is RendererState.ERROR:
        raise CustomException(status_code=404, message=renderer.form_error)
    return renderer


@public_controller.get("/{form_id}", response_model=dict)
def handle_get_public_form(form_id: str, db: Session = Depends(get_db)):
    try:
        renderer = _load(db, form_id)
        form = PublicForm(
            id=renderer.form["id"],
            title=renderer.form["title"],
            description=renderer.form["description"],
            questions=[QuestionResponse.model_validate(question) for question in renderer.questions],
        )
        return {"statusCode": 200, "message": MESSAGE.FORM_FOUND, "data": form}
    except Exception as e:
        handle_route_error(error=e, context=f"GET /public/forms/{form_id}")


@public_controller.post("/{form_id}/submissions", response_model=dict)
def handle_submit_form(form_id: str, data: SubmissionCreate, db: Session = Depends(get_db)):
    try:
        renderer = _load(db, form_id)
        renderer.fill(data.answers)

        state = renderer.submit()
        if renderer.errors:
            raise FormValidationError([
                {"field": question_id, "message": message}
                for question_id, message in renderer.errors.items()
            ])
        if state is not RendererState.SUBMITTED:
            raise CustomException(status_code=500, message=renderer.form_error)

        return {
            "statusCode": 201,
            "message": MESSAGE.SUBMISSION_CREATED,
            "data": {"submission_id": renderer.submission_id},
        }
    except Exception as e:
        handle_route_error(error=e, context=f"POST /public/forms/{form_id}/submissions")
