from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from formwave.config.env_config import settings
from formwave.constants.error import ERROR
from formwave.exceptions import CustomException
from formwave.models.form_model import Form, Submission
from formwave.schema.form_schema import FormListItem, FormWithQuestions, QuestionResponse, ResultsView
from formwave.schema.user_schema import RequestContext
from formwave.services.form_publisher import FormPublisher
from formwave.services.response_aggregator import build_transcripts, summarize_questions
from formwave.services.table_store import StoreError, TableStore
from formwave.utils.logger_utils import handle_service_error, log_info

logger = logging.getLogger(__name__)


def share_url(form_id: str) -> str:
    return f"{settings.PUBLIC_FORM_BASE_URL.rstrip('/')}/{form_id}"


def get_form_list(db: Session, context: RequestContext):
    try:
        counts = (
            db.query(Submission.form_id, func.count(Submission.id).label("response_count"))
            .group_by(Submission.form_id)
            .subquery()
        )
        rows = (
            db.query(Form, func.coalesce(counts.c.response_count, 0))
            .outerjoin(counts, counts.c.form_id == Form.id)
            .filter(Form.user_id == context.caller_id)
            .order_by(Form.created_at.desc())
            .all()
        )
    except SQLAlchemyError as e:
        handle_service_error(
            error=e,
            context="get_form_list",
            custom_exception=CustomException(status_code=500, message=ERROR.FORM_LOAD_FAILED),
        )

    return [
        FormListItem(
            id=form.id,
            user_id=form.user_id,
            title=form.title,
            description=form.description,
            type=form.type,
            version=form.version,
            created_at=form.created_at,
            response_count=count,
            share_url=share_url(form.id),
        )
        for form, count in rows
    ]


def get_form_for_edit(store: TableStore, context: RequestContext, form_id: str) -> FormWithQuestions:
    form = FormPublisher(store).load_owned_form(context, form_id, ERROR.FORM_EDIT_FORBIDDEN)
    try:
        questions = store.select("questions", eq={"form_id": form_id}, order_by="position")
    except StoreError as e:
        handle_service_error(
            error=e,
            context="get_form_for_edit",
            custom_exception=CustomException(status_code=500, message=ERROR.FORM_LOAD_FAILED),
        )
    return FormWithQuestions(
        **form,
        questions=[QuestionResponse.model_validate(question) for question in questions],
    )


def delete_form(db: Session, context: RequestContext, form_id: str) -> None:
    try:
        form = (
            db.query(Form)
            .filter(Form.id == form_id, Form.user_id == context.caller_id)
            .first()
        )
        if not form:
            raise CustomException(status_code=404, message=ERROR.FORM_EDIT_FORBIDDEN)
        db.delete(form)
        db.commit()
    except CustomException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        handle_service_error(
            error=e,
            context="delete_form",
            custom_exception=CustomException(status_code=500, message=ERROR.FORM_DELETE_FAILED),
        )
    log_info(context="FORMS", message=f"Form {form_id} deleted by {context.caller_id}")


def get_form_results(store: TableStore, context: RequestContext, form_id: str, view: ResultsView) -> dict:
    form = FormPublisher(store).load_owned_form(context, form_id, ERROR.FORM_VIEW_FORBIDDEN)
    try:
        questions = store.select("questions", eq={"form_id": form_id}, order_by="position")
        submissions = store.select(
            "submissions", eq={"form_id": form_id}, order_by="submitted_at", descending=True
        )
        answers = store.select(
            "answers", in_=("submission_id", [submission["id"] for submission in submissions])
        ) if submissions else []
    except StoreError as e:
        handle_service_error(
            error=e,
            context="get_form_results",
            custom_exception=CustomException(status_code=500, message=ERROR.FORM_LOAD_FAILED),
        )

    result = {
        "form": {
            "id": form["id"],
            "title": form["title"],
            "description": form["description"],
            "type": form["type"],
            "created_at": form["created_at"],
        },
        "view": view.value,
        "response_count": len(submissions),
        "share_url": share_url(form["id"]),
    }
    if view is ResultsView.SUMMARY:
        result["summaries"] = [summary.to_dict() for summary in summarize_questions(questions, answers)]
    else:
        result["responses"] = build_transcripts(questions, submissions, answers)
    return result
