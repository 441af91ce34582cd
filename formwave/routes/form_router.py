from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from formwave.config.database_config import get_db
from formwave.constants.messages import MESSAGE
from formwave.middleware.auth_middleware import auth_middleware
from formwave.utils.logger_utils import handle_route_error
from formwave.services import form_service
from formwave.services.form_publisher import FormPublisher
from formwave.services.table_store import TableStore
from formwave.schema.form_schema import FormCreate, FormResponse, FormUpdate, ResultsView

form_controller = APIRouter()


@form_controller.post("/create", response_model=dict, dependencies=[Depends(auth_middleware)])
def handle_create_form(request: Request, data: FormCreate, db: Session = Depends(get_db)):
    try:
        form = FormPublisher(TableStore(db)).create_form(request.state.user, data, data.fields)
        return {"statusCode": 201, "message": MESSAGE.FORM_CREATED, "data": FormResponse(**form)}
    except Exception as e:
        handle_route_error(error=e, context="POST /forms/create")


@form_controller.get("", response_model=dict, dependencies=[Depends(auth_middleware)])
def handle_list_forms(request: Request, db: Session = Depends(get_db)):
    try:
        response = form_service.get_form_list(db, request.state.user)
        return {"statusCode": 200, "message": MESSAGE.FORMS_FOUND, "data": response}
    except Exception as e:
        handle_route_error(error=e, context="GET /forms")


@form_controller.get("/{form_id}", response_model=dict, dependencies=[Depends(auth_middleware)])
def handle_get_form(request: Request, form_id: str, db: Session = Depends(get_db)):
    try:
        response = form_service.get_form_for_edit(TableStore(db), request.state.user, form_id)
        return {"statusCode": 200, "message": MESSAGE.FORM_FOUND, "data": response}
    except Exception as e:
        handle_route_error(error=e, context=f"GET /forms/{form_id}")


@form_controller.put("/{form_id}", response_model=dict, dependencies=[Depends(auth_middleware)])
def handle_update_form(request: Request, form_id: str, data: FormUpdate, db: Session = Depends(get_db)):
    try:
        form = FormPublisher(TableStore(db)).update_form(
            request.state.user,
            form_id,
            data,
            data.questions,
            expected_version=data.expected_version,
        )
        return {"statusCode": 200, "message": MESSAGE.FORM_UPDATED, "data": FormResponse(**form)}
    except Exception as e:
        handle_route_error(error=e, context=f"PUT /forms/{form_id}")


@form_controller.delete("/{form_id}", response_model=dict, dependencies=[Depends(auth_middleware)])
def handle_delete_form(request: Request, form_id: str, db: Session = Depends(get_db)):
    try:
        form_service.delete_form(db, request.state.user, form_id)
        return {"statusCode": 200, "message": MESSAGE.FORM_DELETED, "data": []}
    except Exception as e:
        handle_route_error(error=e, context=f"DELETE /forms/{form_id}")


@form_controller.get("/{form_id}/results", response_model=dict, dependencies=[Depends(auth_middleware)])
def handle_form_results(
    request: Request,
    form_id: str,
    view: ResultsView = ResultsView.SUMMARY,
    db: Session = Depends(get_db),
):
    try:
        response = form_service.get_form_results(TableStore(db), request.state.user, form_id, view)
        return {"statusCode": 200, "message": MESSAGE.RESULTS_FOUND, "data": response}
    except Exception as e:
        handle_route_error(error=e, context=f"GET /forms/{form_id}/results")
